"""SNMP exporter config generator."""

from snmpgen.errors import ConfigError, GenerationError, SnmpGenError, TreeLoadError
from snmpgen.generator import ConfigGenerator, generate_config_module
from snmpgen.mib_tree import MibTree, prepare_tree
from snmpgen.models import Lookup, MetricOverride, Module, ModuleRequest, Node

__all__ = [
    "ConfigError",
    "ConfigGenerator",
    "GenerationError",
    "Lookup",
    "MetricOverride",
    "MibTree",
    "Module",
    "ModuleRequest",
    "Node",
    "SnmpGenError",
    "TreeLoadError",
    "generate_config_module",
    "prepare_tree",
]
