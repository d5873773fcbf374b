"""Serialization of generated modules to the exporter YAML format."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from snmpgen.models import JsonDict, Metric, Module


def metric_to_dict(metric: Metric) -> JsonDict:
    data: JsonDict = {
        "name": metric.name,
        "oid": metric.oid,
        "type": metric.type,
        "help": metric.help,
    }
    if metric.indexes:
        data["indexes"] = []
        for index in metric.indexes:
            entry: JsonDict = {"labelname": index.labelname, "type": index.type}
            if index.fixed_size:
                entry["fixed_size"] = index.fixed_size
            data["indexes"].append(entry)
    if metric.lookups:
        data["lookups"] = [
            {
                "labels": list(lookup.labels),
                "labelname": lookup.labelname,
                "oid": lookup.oid,
                "type": lookup.type,
            }
            for lookup in metric.lookups
        ]
    if metric.regex_extracts:
        data["regex_extracts"] = {
            suffix: [{"regex": e.regex, "value": e.value} for e in extracts]
            for suffix, extracts in metric.regex_extracts.items()
        }
    return data


def module_to_dict(module: Module) -> JsonDict:
    data: JsonDict = {"walk": list(module.walk)}
    if module.get:
        data["get"] = list(module.get)
    data["metrics"] = [metric_to_dict(m) for m in module.metrics]
    return data


def modules_to_dict(modules: Mapping[str, Module]) -> Dict[str, Any]:
    return {name: module_to_dict(module) for name, module in modules.items()}


def dumps_modules(modules: Mapping[str, Module]) -> str:
    """Render modules as YAML, keeping keys in declaration order."""
    return yaml.safe_dump(
        modules_to_dict(modules),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )


def write_modules(file_path: str | Path, modules: Mapping[str, Module]) -> Path:
    """Write modules as YAML to ``file_path``, creating parent directories."""
    destination = Path(file_path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(dumps_modules(modules), encoding="utf-8")
    return destination
