"""Normalization of a parsed MIB node tree and the name index built over it."""

from __future__ import annotations

import re
from typing import Callable, Dict

from snmpgen.app_logger import AppLogger
from snmpgen.metric_types import DISPLAY_STRING, DOUBLE, FLOAT, PHYS_ADDRESS48
from snmpgen.models import Node

logger = AppLogger.get(__name__)

NameIndex = Dict[str, Node]

# Accepts both ASCII and UTF-8 hints, even though DisplayString is
# technically ASCII only.
_DISPLAY_STRING_HINT_RE = re.compile(r"\d+[at]")
_MAC_ADDRESS_HINT = "1x:"


def walk_node(node: Node, visit: Callable[[Node], None]) -> None:
    """Call ``visit`` on every node of the subtree, parents before children."""
    for n in node.walk():
        visit(n)


def build_name_index(root: Node) -> NameIndex:
    """Map both the OID and the label of every node to the node.

    Later nodes win when two nodes share an OID or label.
    """
    nodes: NameIndex = {}
    for n in root.walk():
        nodes[n.oid] = n
        nodes[n.label] = n
    return nodes


def _normalize_description(n: Node) -> None:
    # Keep the first sentence only.
    text = " ".join(n.description.split())
    n.description = text.split(". ")[0]


def _normalize_anonymous_indexes(n: Node) -> None:
    # Tables indexed by a bare INTEGER (e.g. snSlotsEntry in
    # LANOPTICS-HUB-MIB) use the entry itself as the index name.
    n.indexes = [n.label if i == "INTEGER" else i for i in n.indexes]


def _infer_type(n: Node) -> None:
    # RFC 2579 display hints.
    if n.hint == _MAC_ADDRESS_HINT:
        n.type = PHYS_ADDRESS48
    if _DISPLAY_STRING_HINT_RE.search(n.hint):
        n.type = DISPLAY_STRING

    # Some MIBs refer to RFC1213 for this, which is too old to have the
    # right hint set.
    if n.textual_convention == DISPLAY_STRING:
        n.type = DISPLAY_STRING

    # Opaque Float/Double.
    if n.textual_convention in (FLOAT, DOUBLE):
        n.type = n.textual_convention


def prepare_tree(root: Node) -> NameIndex:
    """Normalize the tree in place and return its name index.

    Passes run in a fixed order: augments are copied after anonymous
    indexes are renamed, and index propagation to columns runs after
    augments have been resolved.
    """
    nodes = build_name_index(root)

    walk_node(root, _normalize_description)
    walk_node(root, _normalize_anonymous_indexes)

    def resolve_augments(n: Node) -> None:
        if not n.augments:
            return
        augmented = nodes.get(n.augments)
        if augmented is None:
            logger.warning(f"Can't find augmenting oid {n.augments} for {n.label}")
            return
        for child in n.children:
            child.indexes = list(augmented.indexes)
        n.indexes = list(augmented.indexes)

    walk_node(root, resolve_augments)

    def propagate_indexes(n: Node) -> None:
        if n.indexes:
            for child in n.children:
                child.indexes = list(n.indexes)

    walk_node(root, propagate_indexes)
    walk_node(root, _infer_type)

    return nodes


class MibTree:
    """A prepared node tree together with its name index.

    The index is rebuilt on ``clone()`` so the copy never hands out nodes
    belonging to the original tree.
    """

    def __init__(self, root: Node, nodes: NameIndex | None = None) -> None:
        self.root = root
        self.nodes: NameIndex = nodes if nodes is not None else build_name_index(root)

    @classmethod
    def prepare(cls, root: Node) -> MibTree:
        """Normalize ``root`` in place and wrap it."""
        return cls(root, prepare_tree(root))

    def clone(self) -> MibTree:
        root = self.root.copy()
        return MibTree(root, build_name_index(root))

    def get(self, name_or_oid: str) -> Node | None:
        return self.nodes.get(name_or_oid)

    def __contains__(self, name_or_oid: object) -> bool:
        return name_or_oid in self.nodes
