"""Resolve requested names and OIDs to the MIB nodes that own them."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

from snmpgen.metric_types import metric_access, metric_type
from snmpgen.mib_tree import NameIndex
from snmpgen.models import Node
from snmpgen.oid_utils import is_descendant


class OidKind(Enum):
    NOT_FOUND = "not-found"
    SCALAR = "scalar"
    INSTANCE = "instance"
    SUBTREE = "subtree"


def _is_metric(n: Node) -> bool:
    _, supported = metric_type(n.type)
    return supported and metric_access(n.access)


def search_node_tree(oid: str, node: Optional[Node]) -> Optional[Node]:
    """Return the deepest node whose OID is ``oid`` or a dotted prefix of it.

    Children are tried in order and the first one that matches is descended
    into; siblings after it are not considered.
    """
    if node is None or not is_descendant(oid, node.oid):
        return None

    match = node
    while True:
        for child in match.children:
            if is_descendant(oid, child.oid):
                match = child
                break
        else:
            return match


def get_metric_node(
    oid: str, root: Node, nodes: NameIndex
) -> Tuple[Optional[Node], OidKind]:
    """Find the node representing a requested name or OID and classify it.

    Known names/OIDs are scalars when they are a metric without indexes and
    subtrees otherwise. Unknown OIDs are matched against the tree by longest
    prefix and are only accepted as an instance of an indexed table column.
    """
    n = nodes.get(oid)
    if n is not None:
        if _is_metric(n) and not n.indexes:
            return n, OidKind.SCALAR
        return n, OidKind.SUBTREE

    n = search_node_tree(oid, root)
    if n is None:
        return None, OidKind.NOT_FOUND

    # Table instances must be a valid metric node and have an index.
    if not _is_metric(n) or not n.indexes:
        return None, OidKind.NOT_FOUND
    return n, OidKind.INSTANCE
