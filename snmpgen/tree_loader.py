"""Loading of MIB node trees.

Two sources are supported: a JSON dump of the node tree, and pysnmp
compiled MIB modules. Both produce an unprepared tree rooted at ``iso``;
pass it through ``prepare_tree`` before generating.
"""

from __future__ import annotations

import inspect
import json
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, cast

from pysnmp.smi import builder

from snmpgen.app_logger import AppLogger
from snmpgen.errors import TreeLoadError
from snmpgen.models import JsonDict, Node
from snmpgen.oid_utils import oid_str_to_tuple, oid_tuple_to_str

logger = AppLogger.get(__name__)

ROOT_OID = (1,)
ROOT_LABEL = "iso"

# pysnmp syntax classes to net-snmp style type tokens.
SYNTAX_TYPES: Dict[str, str] = {
    "Integer": "INTEGER",
    "Integer32": "INTEGER32",
    "Unsigned32": "UNSIGNED32",
    "Gauge32": "GAUGE",
    "Counter32": "COUNTER",
    "Counter64": "COUNTER64",
    "TimeTicks": "TIMETICKS",
    "IpAddress": "IPADDR",
    "OctetString": "OCTETSTR",
    "Bits": "BITSTRING",
    "ObjectIdentifier": "OBJID",
    "ObjectName": "OBJID",
    "Opaque": "OPAQUE",
}

ACCESS_TYPES: Dict[str, str] = {
    "read-only": "ACCESS_READONLY",
    "read-write": "ACCESS_READWRITE",
    "read-create": "ACCESS_CREATE",
    "write-only": "ACCESS_WRITEONLY",
    "not-accessible": "ACCESS_NOACCESS",
    "accessible-for-notify": "ACCESS_NOTIFY",
}

_SIZE_RE = re.compile(r"ValueSizeConstraint object, consts (\d+), (\d+)")

_STRING_FIELDS = ("type", "access", "augments", "textual_convention", "hint", "description")


def node_from_dict(data: Any) -> Node:
    """Build a node (and its children) from a JSON-style mapping.

    ``null`` attributes are treated as absent.
    """
    if not isinstance(data, Mapping):
        raise TreeLoadError(f"Node must be an object, got {type(data).__name__}: {data!r}")
    try:
        oid = str(data["oid"])
        label = str(data["label"])
    except KeyError as e:
        raise TreeLoadError(f"Node is missing required key {e}") from e

    try:
        attrs = {key: str(data.get(key) or "") for key in _STRING_FIELDS}
        indexes = [str(i) for i in data.get("indexes") or []]
        size = int(data.get("fixed_size") or 0)
        children = data.get("children") or []
        if not isinstance(children, list):
            raise TypeError(f"children must be a list, got {type(children).__name__}")
    except (TypeError, ValueError) as e:
        raise TreeLoadError(f"Invalid attributes for node {label} ({oid}): {e}") from e

    return Node(
        oid=oid,
        label=label,
        children=[node_from_dict(c) for c in children],
        indexes=indexes,
        fixed_size=size,
        **attrs,
    )


def load_tree_from_json(path: str | Path) -> Node:
    """Load a node tree from a JSON dump."""
    tree_path = Path(path)
    if not tree_path.exists():
        raise TreeLoadError(f"Tree file {tree_path} not found")
    try:
        with tree_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise TreeLoadError(f"Failed to parse {tree_path}: {e}") from e
    if not isinstance(data, dict):
        raise TreeLoadError(f"{tree_path} must contain a single root node object")
    return node_from_dict(data)


def _call(obj: object, name: str) -> Any:
    fn = getattr(obj, name, None)
    if not callable(fn):
        return None
    try:
        return fn()
    except TypeError:
        return None


def syntax_type(syntax: object) -> str:
    """Return the net-snmp type token for a pysnmp syntax instance."""
    for cls in type(syntax).__mro__:
        token = SYNTAX_TYPES.get(cls.__name__)
        if token is not None:
            return token
    return ""


def textual_convention(syntax: object) -> str:
    """Return the TEXTUAL-CONVENTION name of a syntax, or "" for plain types."""
    mro_names = [cls.__name__ for cls in type(syntax).__mro__]
    if "TextualConvention" in mro_names[1:]:
        return mro_names[0]
    return ""


def fixed_size(syntax: object) -> int:
    """Return the size of a fixed-length string syntax, 0 otherwise."""
    spec = getattr(syntax, "subtypeSpec", None)
    if spec is None:
        return 0
    for low, high in _SIZE_RE.findall(repr(spec)):
        if low == high and int(low) > 0:
            return int(low)
    return 0


def symbol_to_node(label: str, sym: object) -> Node:
    """Describe one pysnmp MIB symbol (scalar, column, row, table...) as a node."""
    oid = oid_tuple_to_str(cast(Sequence[int], sym.getName()))  # type: ignore[attr-defined]
    node = Node(oid=oid, label=label)

    description = _call(sym, "getDescription")
    if description:
        node.description = str(description)

    syntax = _call(sym, "getSyntax")
    if syntax is not None and syntax_type(syntax):
        node.type = syntax_type(syntax)
        node.textual_convention = textual_convention(syntax)
        hint = getattr(syntax, "displayHint", "")
        node.hint = hint if isinstance(hint, str) else ""
        node.fixed_size = fixed_size(syntax)

    access = _call(sym, "getMaxAccess")
    if access:
        node.access = ACCESS_TYPES.get(str(access), "")

    index_names = _call(sym, "getIndexNames")
    if index_names:
        node.indexes = [str(idx[2]) for idx in index_names]
    return node


def _augmentations(symbols: Mapping[str, Mapping[str, object]]) -> Dict[str, str]:
    """Map each augmenting row label to the label of the row it augments."""
    augments: Dict[str, str] = {}
    for mib_symbols in symbols.values():
        for label, sym in mib_symbols.items():
            rows = getattr(sym, "augmentingRows", None)
            if not isinstance(rows, Mapping):
                continue
            for key in rows:
                augments[str(key[1])] = label
    return augments


def build_tree(nodes: Iterable[Node]) -> Node:
    """Nest nodes under their nearest present ancestor below an ``iso`` root."""
    by_oid: Dict[Tuple[int, ...], Node] = {}
    for n in nodes:
        oid = oid_str_to_tuple(n.oid)
        if oid[: len(ROOT_OID)] != ROOT_OID:
            logger.debug(f"Skipping {n.label} ({n.oid}) outside the iso tree")
            continue
        by_oid[oid] = n

    root = by_oid.setdefault(ROOT_OID, Node(oid=oid_tuple_to_str(ROOT_OID), label=ROOT_LABEL))
    for oid in sorted(by_oid):
        if oid == ROOT_OID:
            continue
        parent_oid = oid[:-1]
        while parent_oid not in by_oid:
            parent_oid = parent_oid[:-1]
        by_oid[parent_oid].children.append(by_oid[oid])
    return root


def load_tree_from_mibs(
    mib_names: Sequence[str], mib_dirs: Optional[Sequence[str | Path]] = None
) -> Node:
    """Load pysnmp compiled MIB modules and build the node tree from their symbols."""
    mib_builder = builder.MibBuilder()
    mib_builder.loadTexts = True
    for mib_dir in mib_dirs or []:
        mib_builder.add_mib_sources(builder.DirMibSource(str(mib_dir)))

    try:
        mib_builder.load_modules(*mib_names)
    except Exception as e:
        raise TreeLoadError(f"Failed to load MIB modules {', '.join(mib_names)}: {e}") from e

    symbols = cast(Mapping[str, Mapping[str, object]], mib_builder.mibSymbols)
    return build_tree_from_symbols(symbols)


def build_tree_from_symbols(symbols: Mapping[str, Mapping[str, object]]) -> Node:
    """Build the node tree from a ``mibSymbols`` style mapping."""
    augments = _augmentations(symbols)
    nodes: List[Node] = []
    for mib_name, mib_symbols in symbols.items():
        for label, sym in mib_symbols.items():
            if inspect.isclass(sym) or not callable(getattr(sym, "getName", None)):
                continue
            # Instances are values, not definitions.
            if type(sym).__name__ == "MibScalarInstance":
                continue
            node = symbol_to_node(label, sym)
            node.augments = augments.get(label, "")
            nodes.append(node)
        logger.debug(f"Loaded symbols from {mib_name}")
    return build_tree(nodes)


def tree_to_dict(node: Node) -> JsonDict:
    """Inverse of ``node_from_dict``, omitting empty attributes."""
    data: JsonDict = {"oid": node.oid, "label": node.label}
    for key in (
        "type",
        "access",
        "augments",
        "textual_convention",
        "hint",
        "description",
        "fixed_size",
    ):
        value = getattr(node, key)
        if value:
            data[key] = value
    if node.indexes:
        data["indexes"] = list(node.indexes)
    if node.children:
        data["children"] = [tree_to_dict(c) for c in node.children]
    return data


def write_tree_json(path: str | Path, root: Node) -> Path:
    """Write ``root`` as a JSON dump that ``load_tree_from_json`` reads back."""
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(json.dumps(tree_to_dict(root), indent=2) + "\n", encoding="utf-8")
    return destination
