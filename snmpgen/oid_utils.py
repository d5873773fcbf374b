"""OID utility functions for consistent OID handling across the generator.

OIDs are kept as dotted-decimal strings throughout the generator since the
walk/get lists and the name index are keyed by them. Tuple conversion is
used where numeric ordering is needed, e.g. when nesting loaded nodes.
"""

from typing import Iterable, List, Tuple, Union


def oid_str_to_tuple(oid_str: str) -> Tuple[int, ...]:
    """Convert OID string to tuple of integers.

    Handles various OID string formats:
    - With leading dot: ".1.3.6.1.2.1.1.1.0"
    - Without leading dot: "1.3.6.1.2.1.1.1.0"
    - Empty strings return empty tuple

    Examples:
        >>> oid_str_to_tuple(".1.3.6.1.2.1.1.1.0")
        (1, 3, 6, 1, 2, 1, 1, 1, 0)
        >>> oid_str_to_tuple("")
        ()
    """
    oid_str = oid_str.strip()
    if oid_str.startswith("."):
        oid_str = oid_str[1:]
    if not oid_str:
        return tuple()
    return tuple(int(x) for x in oid_str.split("."))


def oid_tuple_to_str(oid_tuple: Union[Tuple[int, ...], List[int]]) -> str:
    """Convert OID tuple to dot-separated string.

    Examples:
        >>> oid_tuple_to_str((1, 3, 6, 1))
        '1.3.6.1'
    """
    return ".".join(str(x) for x in oid_tuple)


def is_descendant(oid: str, parent_oid: str) -> bool:
    """Return True if ``oid`` equals ``parent_oid`` or lies beneath it.

    Comparison is on whole dotted components, so ``1.3.6.10`` is not a
    descendant of ``1.3.6.1``.
    """
    return (oid + ".").startswith(parent_oid + ".")


def minimize_oids(oids: Iterable[str]) -> List[str]:
    """Reduce a set of overlapping OID subtrees to a minimal covering list.

    The result is sorted lexicographically and contains no OID that is a
    dotted descendant of another one. Duplicates collapse to one entry.

    Examples:
        >>> minimize_oids(["1.3.6.1.2.1", "1.3.6.1.2"])
        ['1.3.6.1.2']
    """
    minimized: List[str] = []
    prev_oid = ""
    for oid in sorted(oids):
        if not prev_oid or not is_descendant(oid, prev_oid):
            minimized.append(oid)
            prev_oid = oid
    return minimized
