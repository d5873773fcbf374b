"""Shared fixtures: a small IF-MIB shaped node tree."""

from typing import Any

import pytest

from snmpgen.mib_tree import MibTree
from snmpgen.models import Node

RO = "ACCESS_READONLY"
RW = "ACCESS_READWRITE"
NA = "ACCESS_NOACCESS"

IF_ENTRY = "1.3.6.1.2.1.2.2.1"
IF_X_ENTRY = "1.3.6.1.2.1.31.1.1.1"


def _leaf(oid: str, label: str, typ: str, access: str = RO, **kwargs: Any) -> Node:
    return Node(oid=oid, label=label, type=typ, access=access, **kwargs)


def build_if_mib_tree() -> Node:
    """Build an unprepared tree covering scalars, tables, augments and odd cases."""
    system = Node(
        oid="1.3.6.1.2.1.1",
        label="system",
        children=[
            _leaf(
                "1.3.6.1.2.1.1.1",
                "sysDescr",
                "OCTETSTR",
                textual_convention="DisplayString",
                description="A textual description of the entity.  This value\n"
                "      should include the full name.",
            ),
            _leaf(
                "1.3.6.1.2.1.1.3",
                "sysUpTime",
                "TIMETICKS",
                description="The time since the network management portion was re-initialized.",
            ),
        ],
    )
    if_entry = Node(
        oid=IF_ENTRY,
        label="ifEntry",
        access=NA,
        indexes=["ifIndex"],
        children=[
            _leaf(IF_ENTRY + ".1", "ifIndex", "INTEGER", description="A unique value."),
            _leaf(
                IF_ENTRY + ".2",
                "ifDescr",
                "OCTETSTR",
                hint="255a",
                description="A textual string containing information about the\n"
                "   interface.  This string should include the name.",
            ),
            _leaf(IF_ENTRY + ".3", "ifType", "INTEGER", description="The type of interface."),
            _leaf(
                IF_ENTRY + ".6",
                "ifPhysAddress",
                "OCTETSTR",
                hint="1x:",
                textual_convention="PhysAddress",
                description="The interface's address.",
            ),
            _leaf(
                IF_ENTRY + ".10",
                "ifInOctets",
                "COUNTER",
                description="The total number of octets received.",
            ),
            _leaf(IF_ENTRY + ".22", "ifSpecific", "OBJID", description="Deprecated."),
        ],
    )
    interfaces = Node(
        oid="1.3.6.1.2.1.2",
        label="interfaces",
        children=[
            _leaf("1.3.6.1.2.1.2.1", "ifNumber", "INTEGER"),
            Node(oid="1.3.6.1.2.1.2.2", label="ifTable", access=NA, children=[if_entry]),
        ],
    )
    if_x_entry = Node(
        oid=IF_X_ENTRY,
        label="ifXEntry",
        access=NA,
        augments="ifEntry",
        children=[
            _leaf(IF_X_ENTRY + ".1", "ifName", "OCTETSTR", textual_convention="DisplayString"),
            _leaf(IF_X_ENTRY + ".6", "ifHCInOctets", "COUNTER64"),
            _leaf(IF_X_ENTRY + ".18", "ifAlias", "OCTETSTR", RW, textual_convention="DisplayString"),
        ],
    )
    if_mib = Node(
        oid="1.3.6.1.2.1.31",
        label="ifMIB",
        children=[
            Node(
                oid="1.3.6.1.2.1.31.1",
                label="ifMIBObjects",
                children=[
                    Node(oid="1.3.6.1.2.1.31.1.1", label="ifXTable", access=NA, children=[if_x_entry])
                ],
            )
        ],
    )
    enterprise = Node(
        oid="1.3.6.1.4.1.9999",
        label="acme",
        children=[
            Node(
                oid="1.3.6.1.4.1.9999.1",
                label="snSlotsTable",
                access=NA,
                children=[
                    Node(
                        oid="1.3.6.1.4.1.9999.1.1",
                        label="snSlotsEntry",
                        access=NA,
                        indexes=["INTEGER"],
                        children=[_leaf("1.3.6.1.4.1.9999.1.1.1", "snSlotsState", "INTEGER")],
                    )
                ],
            ),
            _leaf("1.3.6.1.4.1.9999.2", "acmeTemperature", "OPAQUE", textual_convention="Float"),
            Node(
                oid="1.3.6.1.4.1.9999.3",
                label="acmeBrokenEntry",
                access=NA,
                augments="noSuchEntry",
                children=[_leaf("1.3.6.1.4.1.9999.3.1", "acmeBrokenValue", "INTEGER")],
            ),
            _leaf("1.3.6.1.4.1.9999.4", "acme-Port.Count", "GAUGE"),
        ],
    )
    return Node(
        oid="1",
        label="iso",
        children=[
            Node(oid="1.3.6.1.2.1", label="mib-2", children=[system, interfaces, if_mib]),
            Node(oid="1.3.6.1.4.1", label="enterprises", children=[enterprise]),
        ],
    )


@pytest.fixture
def if_mib_root() -> Node:
    """Unprepared IF-MIB shaped tree."""
    return build_if_mib_tree()


@pytest.fixture
def if_mib_tree(if_mib_root: Node) -> MibTree:
    """Prepared IF-MIB shaped tree with its name index."""
    return MibTree.prepare(if_mib_root)
