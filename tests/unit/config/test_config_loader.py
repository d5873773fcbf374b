"""Tests for building module requests from generator config."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from snmpgen.app_config import AppConfig
from snmpgen.config_loader import load_module_requests, parse_module_request
from snmpgen.errors import ConfigError
from snmpgen.models import Lookup, MetricOverride, ModuleRequest, RegexpExtract


def test_parse_full_module() -> None:
    request = parse_module_request(
        "if_mib",
        {
            "walk": ["sysUpTime", "interfaces", "1.3.6.1.2.1.31.1.1"],
            "lookups": [{"old_index": "ifIndex", "new_index": "ifDescr"}],
            "overrides": {
                "ifType": {"type": "gauge"},
                "ifAlias": {
                    "regex_extracts": {"Status": [{"regex": ".*up.*", "value": "1"}]}
                },
            },
        },
    )
    assert request == ModuleRequest(
        walk=["sysUpTime", "interfaces", "1.3.6.1.2.1.31.1.1"],
        lookups=[Lookup(old_index="ifIndex", new_index="ifDescr")],
        overrides={
            "ifType": MetricOverride(type="gauge"),
            "ifAlias": MetricOverride(
                regex_extracts={"Status": [RegexpExtract(regex=".*up.*", value="1")]}
            ),
        },
    )


def test_parse_empty_module_has_defaults() -> None:
    assert parse_module_request("empty", None) == ModuleRequest()


def test_regex_value_defaults_to_first_group() -> None:
    request = parse_module_request(
        "m", {"overrides": {"x": {"regex_extracts": {"": [{"regex": "([0-9]+)"}]}}}}
    )
    assert request.overrides["x"].regex_extracts == {"": [RegexpExtract(regex="([0-9]+)", value="$1")]}


@pytest.mark.parametrize(
    "raw, message",
    [
        ({"walk": "sysUpTime"}, "walk must be a list"),
        ({"lookups": [{"old_index": "ifIndex"}]}, "both old_index and new_index"),
        ({"lookups": {"old_index": "a", "new_index": "b"}}, "lookups must be a list"),
        ({"overrides": {"ifType": {"type": "string"}}}, "unknown type 'string'"),
        ({"overrides": ["ifType"]}, "overrides must be a mapping"),
        (
            {"overrides": {"ifAlias": {"regex_extracts": {"": [{"regex": "(unclosed"}]}}}},
            "invalid regex",
        ),
        ({"overrides": {"ifAlias": {"regex_extracts": {"": [{"value": "1"}]}}}}, "needs a regex"),
        (["walk"], "settings must be a mapping"),
        ({"walk": [1.3]}, "walk entry 1.3 is not a string, quote numeric OIDs"),
    ],
)
def test_invalid_module_settings(raw: Any, message: str) -> None:
    with pytest.raises(ConfigError, match=message):
        parse_module_request("bad", raw)


def test_load_module_requests_requires_modules() -> None:
    with pytest.raises(ConfigError, match="No modules configured"):
        load_module_requests(None)
    with pytest.raises(ConfigError, match="must be a mapping"):
        load_module_requests(["if_mib"])


def test_load_module_requests_from_yaml_via_app_config(tmp_path: Path) -> None:
    config_file = tmp_path / "generator.yml"
    config_file.write_text(
        """
logger:
  level: DEBUG
modules:
  if_mib:
    walk: [sysUpTime, ifTable]
    lookups:
      - old_index: ifIndex
        new_index: ifDescr
    overrides:
      ifType:
        type: DisplayString
  system:
    walk:
      - 1.3.6.1.2.1.1
""",
        encoding="utf-8",
    )
    AppConfig.reset()
    try:
        config = AppConfig(str(config_file))
        requests = load_module_requests(config.get("modules"))
    finally:
        AppConfig.reset()

    assert sorted(requests) == ["if_mib", "system"]
    assert requests["if_mib"].walk == ["sysUpTime", "ifTable"]
    assert requests["if_mib"].lookups == [Lookup("ifIndex", "ifDescr")]
    assert requests["if_mib"].overrides["ifType"].type == "DisplayString"
    assert requests["system"].walk == ["1.3.6.1.2.1.1"]


def test_app_config_missing_file(tmp_path: Path) -> None:
    AppConfig.reset()
    try:
        with pytest.raises(FileNotFoundError):
            AppConfig(str(tmp_path / "missing.yml"))
    finally:
        AppConfig.reset()


def test_unquoted_numeric_walk_entry_from_yaml_is_rejected(tmp_path: Path) -> None:
    config_file = tmp_path / "generator.yml"
    config_file.write_text("modules:\n  short:\n    walk:\n      - 1.30\n", encoding="utf-8")
    AppConfig.reset()
    try:
        config = AppConfig(str(config_file))
        with pytest.raises(ConfigError, match="quote numeric OIDs"):
            load_module_requests(config.get("modules"))
    finally:
        AppConfig.reset()


def test_app_config_broken_yaml(tmp_path: Path) -> None:
    config_file = tmp_path / "generator.yml"
    config_file.write_text("modules: [unclosed\n  walk: :\n", encoding="utf-8")
    AppConfig.reset()
    try:
        with pytest.raises(ConfigError, match="Failed to load config file"):
            AppConfig(str(config_file))
    finally:
        AppConfig.reset()
