"""Generation of polling modules from a prepared MIB tree.

For each module request the generator resolves the walk roots, synthesizes
typed metric descriptors for every usable node below them, rewrites indexes
according to the lookups and finally reduces everything that has to be
polled to a minimal list of walk and get OIDs.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Set

from snmpgen.app_logger import AppLogger
from snmpgen.errors import GenerationError
from snmpgen.labels import sanitize_label_name
from snmpgen.metric_types import metric_access, metric_type
from snmpgen.mib_tree import MibTree
from snmpgen.models import (
    Index,
    Metric,
    MetricLookup,
    Module,
    ModuleRequest,
    Node,
)
from snmpgen.oid_utils import minimize_oids
from snmpgen.resolver import OidKind, get_metric_node

logger = AppLogger.get(__name__)

# A trailing period marks an OID to fetch with a get instead of a walk.
GET_MARKER = "."


def _apply_type_overrides(request: ModuleRequest, tree: MibTree) -> MibTree:
    """Return the tree to generate from, cloned if any type is overridden."""
    type_overrides: Dict[str, str] = {}
    for name, params in request.overrides.items():
        if not params.type:
            continue
        if name not in tree:
            logger.warning(f"Could not find metric '{name}' to override type")
            continue
        type_overrides[name] = params.type

    if not type_overrides:
        return tree

    tree = tree.clone()
    for name, typ in type_overrides.items():
        node = tree.get(name)
        if node is not None:
            node.type = typ
    return tree


def _build_metric(n: Node, tree: MibTree) -> Optional[Metric]:
    """Describe ``n`` as a metric, or return None if it cannot be one."""
    typ, ok = metric_type(n.type)
    if not ok:
        return None
    if not metric_access(n.access):
        return None

    metric = Metric(
        name=sanitize_label_name(n.label),
        oid=n.oid,
        type=typ,
        help=f"{n.description} - {n.oid}",
    )
    for i in n.indexes:
        index_node = tree.get(i)
        if index_node is None:
            logger.warning(f"Error, can't find index {i} for node {n.label}")
            return None
        index_type, ok = metric_type(index_node.type)
        if not ok:
            logger.warning(
                f"Error, can't handle index type {index_node.type} for node {n.label}"
            )
            return None
        metric.indexes.append(
            Index(labelname=i, type=index_type, fixed_size=index_node.fixed_size)
        )
    return metric


def generate_config_module(
    request: ModuleRequest, tree: MibTree, module_name: Optional[str] = None
) -> Module:
    """Generate the polling module for one request.

    ``tree`` must already be prepared. It is never modified: type overrides
    are applied to a private clone.

    Raises:
        GenerationError: a walk root cannot be found, or a lookup refers to
            an unknown index or one with an unsupported type.
    """
    out = Module()
    need_to_walk: Set[str] = set()
    table_instances: Dict[str, List[str]] = {}

    tree = _apply_type_overrides(request, tree)

    # Remove redundant OIDs to be walked.
    to_walk = []
    for oid in request.walk:
        n = tree.get(oid)
        to_walk.append(n.oid if n is not None else oid)
    to_walk = minimize_oids(to_walk)

    # Find all top-level nodes.
    metric_nodes: Dict[int, Node] = {}
    for oid in to_walk:
        metric_node, kind = get_metric_node(oid, tree.root, tree.nodes)
        if kind is OidKind.NOT_FOUND or metric_node is None:
            raise GenerationError(f"Cannot find oid '{oid}' to walk", module_name)
        if kind is OidKind.SUBTREE:
            need_to_walk.add(oid)
        elif kind is OidKind.INSTANCE:
            need_to_walk.add(oid + GET_MARKER)
            # Save the instance index for lookups.
            index = oid.replace(metric_node.oid, "", 1)
            table_instances.setdefault(metric_node.oid, []).append(index)
        elif kind is OidKind.SCALAR:
            # Scalars are always instance 0.
            need_to_walk.add(oid + ".0" + GET_MARKER)
        metric_nodes[id(metric_node)] = metric_node

    for metric_node in sorted(metric_nodes.values(), key=lambda n: n.oid):
        for n in metric_node.walk():
            metric = _build_metric(n, tree)
            if metric is not None:
                out.metrics.append(metric)

    for lookup in request.lookups:
        for metric in out.metrics:
            for index in metric.indexes:
                if index.labelname != lookup.old_index:
                    continue
                index_node = tree.get(lookup.new_index)
                if index_node is None:
                    raise GenerationError(
                        f"Unknown index '{lookup.new_index}'", module_name
                    )
                typ, ok = metric_type(index_node.type)
                if not ok:
                    raise GenerationError(
                        f"Unknown index type {index_node.type} for {lookup.new_index}",
                        module_name,
                    )
                label = sanitize_label_name(index_node.label)
                # Avoid leaving the old labelname around.
                index.labelname = label
                metric.lookups.append(
                    MetricLookup(
                        labels=[label], labelname=label, type=typ, oid=index_node.oid
                    )
                )
                # Make sure the lookup OID(s) get polled.
                instances = table_instances.get(metric.oid, [])
                if instances:
                    for suffix in instances:
                        need_to_walk.add(index_node.oid + suffix + GET_MARKER)
                else:
                    need_to_walk.add(index_node.oid)

    for name, params in request.overrides.items():
        for metric in out.metrics:
            if name in (metric.name, metric.oid):
                metric.regex_extracts = dict(params.regex_extracts)

    # Remove redundant OIDs and separate walks from gets.
    for oid in minimize_oids(need_to_walk):
        if oid.endswith(GET_MARKER):
            out.get.append(oid[: -len(GET_MARKER)])
        else:
            out.walk.append(oid)
    return out


class ConfigGenerator:
    """Generates modules for a set of requests against one MIB tree."""

    def __init__(self, root: Node) -> None:
        self.tree = MibTree.prepare(root)

    def generate(self, request: ModuleRequest, module_name: Optional[str] = None) -> Module:
        return generate_config_module(request, self.tree, module_name)

    def generate_all(self, requests: Mapping[str, ModuleRequest]) -> Dict[str, Module]:
        """Generate every module, in module name order."""
        modules: Dict[str, Module] = {}
        for name in sorted(requests):
            logger.info(f"Generating config for module {name}")
            module = self.generate(requests[name], name)
            logger.debug(
                f"Module {name}: {len(module.walk)} walks, {len(module.get)} gets, "
                f"{len(module.metrics)} metrics"
            )
            modules[name] = module
        return modules
