import pytest

from snmpgen.oid_utils import is_descendant, minimize_oids, oid_str_to_tuple, oid_tuple_to_str


def test_oid_str_to_tuple_formats() -> None:
    assert oid_str_to_tuple("1.3.6.1.2.1.1.1.0") == (1, 3, 6, 1, 2, 1, 1, 1, 0)
    assert oid_str_to_tuple(".1.3.6.1.2.1.1.1.0") == (1, 3, 6, 1, 2, 1, 1, 1, 0)
    assert oid_str_to_tuple("  .1.3.6.1  ") == (1, 3, 6, 1)
    assert oid_str_to_tuple("") == ()


def test_oid_str_to_tuple_invalid_component() -> None:
    with pytest.raises(ValueError):
        oid_str_to_tuple("1.3.bad.6")


def test_oid_tuple_to_str() -> None:
    assert oid_tuple_to_str((1, 3, 6, 1)) == "1.3.6.1"
    assert oid_tuple_to_str([1, 3]) == "1.3"
    assert oid_tuple_to_str(()) == ""


def test_is_descendant_uses_whole_components() -> None:
    assert is_descendant("1.3.6.1.2", "1.3.6.1")
    assert is_descendant("1.3.6.1", "1.3.6.1")
    assert not is_descendant("1.3.6.10", "1.3.6.1")
    assert not is_descendant("1.3.6", "1.3.6.1")


def test_minimize_drops_descendants() -> None:
    assert minimize_oids(["1.3.6.1.2", "1.3.6.1.2.1"]) == ["1.3.6.1.2"]
    assert minimize_oids(["1.3.6.1.2.1", "1.3.6.1.2"]) == ["1.3.6.1.2"]


def test_minimize_keeps_siblings_with_shared_string_prefix() -> None:
    assert minimize_oids(["1.3.6.1.2.1.2.2.1.10", "1.3.6.1.2.1.2.2.1.1"]) == [
        "1.3.6.1.2.1.2.2.1.1",
        "1.3.6.1.2.1.2.2.1.10",
    ]


def test_minimize_collapses_duplicates_and_does_not_mutate_input() -> None:
    oids = ["1.3.6.1.4", "1.3.6.1.2", "1.3.6.1.4"]
    assert minimize_oids(oids) == ["1.3.6.1.2", "1.3.6.1.4"]
    assert oids == ["1.3.6.1.4", "1.3.6.1.2", "1.3.6.1.4"]


def test_minimize_is_idempotent_and_result_is_an_antichain() -> None:
    oids = [
        "1.3.6.1.2.1.1",
        "1.3.6.1.2.1.1.3",
        "1.3.6.1.2.1.2.2.1.10",
        "1.3.6.1.2.1.2.2",
        "1.3.6.1.2.1.31.1.1.1.1",
        "1.3.6.1.4.1.9999",
        "1.3.6.1.4.1.99",
    ]
    once = minimize_oids(oids)
    assert minimize_oids(once) == once
    assert once == ["1.3.6.1.2.1.1", "1.3.6.1.2.1.2.2", "1.3.6.1.2.1.31.1.1.1.1", "1.3.6.1.4.1.99", "1.3.6.1.4.1.9999"]
    for a in once:
        for b in once:
            if a != b:
                assert not is_descendant(a, b)


def test_minimize_get_markers_are_covered_by_walks() -> None:
    oids = ["1.3.6.1.2.1.1", "1.3.6.1.2.1.1.3.0.", "1.3.6.1.2.1.2.2.1.10.5."]
    assert minimize_oids(oids) == ["1.3.6.1.2.1.1", "1.3.6.1.2.1.2.2.1.10.5."]
