"""Data model shared by the tree preparer, resolver and config generator."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional


@dataclass
class Node:
    """One MIB object definition.

    ``children`` are owned by this node. ``augments`` and ``indexes`` hold
    names that are resolved through the name index, never references.
    """

    oid: str
    label: str
    children: List[Node] = field(default_factory=list)
    type: str = ""
    access: str = ""
    indexes: List[str] = field(default_factory=list)
    augments: str = ""
    textual_convention: str = ""
    hint: str = ""
    description: str = ""
    fixed_size: int = 0

    def copy(self) -> Node:
        """Return a deep copy of this node and its whole subtree."""
        return copy.deepcopy(self)

    def walk(self) -> Iterator[Node]:
        """Yield this node and every descendant, parents before children."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def __repr__(self) -> str:
        return f"Node({self.label!r}, oid={self.oid!r}, children={len(self.children)})"


@dataclass(frozen=True)
class RegexpExtract:
    regex: str
    value: str = "$1"


@dataclass
class MetricOverride:
    """Per-object override from a module request."""

    type: Optional[str] = None
    regex_extracts: Dict[str, List[RegexpExtract]] = field(default_factory=dict)


@dataclass(frozen=True)
class Lookup:
    old_index: str
    new_index: str


@dataclass
class ModuleRequest:
    """What one output module should poll."""

    walk: List[str] = field(default_factory=list)
    overrides: Dict[str, MetricOverride] = field(default_factory=dict)
    lookups: List[Lookup] = field(default_factory=list)


@dataclass
class Index:
    labelname: str
    type: str = ""
    fixed_size: int = 0


@dataclass
class MetricLookup:
    labels: List[str]
    labelname: str
    type: str
    oid: str


@dataclass
class Metric:
    name: str
    oid: str
    type: str
    help: str
    indexes: List[Index] = field(default_factory=list)
    lookups: List[MetricLookup] = field(default_factory=list)
    regex_extracts: Dict[str, List[RegexpExtract]] = field(default_factory=dict)


@dataclass
class Module:
    """Generated polling configuration for one module request."""

    walk: List[str] = field(default_factory=list)
    get: List[str] = field(default_factory=list)
    metrics: List[Metric] = field(default_factory=list)

    def metric(self, name: str) -> Optional[Metric]:
        """Return the first metric with the given name, if any."""
        for metric in self.metrics:
            if metric.name == name:
                return metric
        return None


JsonDict = Dict[str, Any]
