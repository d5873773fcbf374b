"""Classification of MIB syntax and access tokens.

Syntax tokens follow the net-snmp naming (``INTEGER``, ``COUNTER64``,
``OCTETSTR``...) and may also already be one of the metric kinds, which is
how type overrides and inferred types flow through the same mapping.
"""

from typing import Dict, FrozenSet, Tuple

GAUGE = "gauge"
COUNTER = "counter"
OCTET_STRING = "OctetString"
IP_ADDR = "IpAddr"
PHYS_ADDRESS48 = "PhysAddress48"
DISPLAY_STRING = "DisplayString"
FLOAT = "Float"
DOUBLE = "Double"

METRIC_KINDS: FrozenSet[str] = frozenset(
    {
        GAUGE,
        COUNTER,
        OCTET_STRING,
        IP_ADDR,
        PHYS_ADDRESS48,
        DISPLAY_STRING,
        FLOAT,
        DOUBLE,
    }
)

_TYPE_MAP: Dict[str, str] = {
    "gauge": GAUGE,
    "INTEGER": GAUGE,
    "GAUGE": GAUGE,
    "TIMETICKS": GAUGE,
    "UINTEGER": GAUGE,
    "UNSIGNED32": GAUGE,
    "INTEGER32": GAUGE,
    "counter": COUNTER,
    "COUNTER": COUNTER,
    "COUNTER64": COUNTER,
    "OctetString": OCTET_STRING,
    "OCTETSTR": OCTET_STRING,
    "BITSTRING": OCTET_STRING,
    "IpAddr": IP_ADDR,
    "IPADDR": IP_ADDR,
    "NETADDR": IP_ADDR,
    PHYS_ADDRESS48: PHYS_ADDRESS48,
    DISPLAY_STRING: DISPLAY_STRING,
    FLOAT: FLOAT,
    DOUBLE: DOUBLE,
}

ACCESSIBLE: FrozenSet[str] = frozenset(
    {
        "ACCESS_READONLY",
        "ACCESS_READWRITE",
        "ACCESS_CREATE",
        # Index columns are not-accessible but still present in the walk.
        "ACCESS_NOACCESS",
    }
)


def metric_type(token: str) -> Tuple[str, bool]:
    """Map a syntax token to a metric kind.

    Returns ``("", False)`` for unsupported tokens. Callers treat that as a
    reason to skip the node, not as an error.
    """
    kind = _TYPE_MAP.get(token)
    if kind is None:
        return "", False
    return kind, True


def metric_access(token: str) -> bool:
    """Return True if the access token describes an object present in a walk."""
    return token in ACCESSIBLE
