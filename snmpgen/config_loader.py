"""Build module requests from the ``modules`` section of the generator config.

Expected layout (YAML)::

    modules:
      if_mib:
        walk: [sysUpTime, interfaces]
        lookups:
          - old_index: ifIndex
            new_index: ifDescr
        overrides:
          ifType:
            type: gauge
          ifAlias:
            regex_extracts:
              Status:
                - regex: '.*up.*'
                  value: '1'
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping

from snmpgen.errors import ConfigError
from snmpgen.metric_types import METRIC_KINDS
from snmpgen.models import Lookup, MetricOverride, ModuleRequest, RegexpExtract


def _plain(value: Any) -> Any:
    """Convert Dynaconf boxes and other mappings/sequences into dicts and lists."""
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def _parse_regex_extracts(module: str, name: str, raw: Any) -> Dict[str, List[RegexpExtract]]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Module {module}: regex_extracts of '{name}' must be a mapping")

    extracts: Dict[str, List[RegexpExtract]] = {}
    for suffix, entries in raw.items():
        if not isinstance(entries, list):
            raise ConfigError(
                f"Module {module}: regex_extracts '{suffix}' of '{name}' must be a list"
            )
        parsed = []
        for entry in entries:
            if not isinstance(entry, dict) or "regex" not in entry:
                raise ConfigError(
                    f"Module {module}: regex_extracts '{suffix}' of '{name}' needs a regex"
                )
            try:
                re.compile(str(entry["regex"]))
            except re.error as e:
                raise ConfigError(
                    f"Module {module}: invalid regex '{entry['regex']}' for '{name}': {e}"
                ) from e
            parsed.append(
                RegexpExtract(regex=str(entry["regex"]), value=str(entry.get("value", "$1")))
            )
        extracts[str(suffix)] = parsed
    return extracts


def _parse_overrides(module: str, raw: Any) -> Dict[str, MetricOverride]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Module {module}: overrides must be a mapping")

    overrides: Dict[str, MetricOverride] = {}
    for name, params in raw.items():
        params = params or {}
        if not isinstance(params, dict):
            raise ConfigError(f"Module {module}: override for '{name}' must be a mapping")
        typ = params.get("type")
        if typ and typ not in METRIC_KINDS:
            raise ConfigError(
                f"Module {module}: unknown type '{typ}' in override for '{name}', "
                f"must be one of {sorted(METRIC_KINDS)}"
            )
        overrides[name] = MetricOverride(
            type=typ or None,
            regex_extracts=_parse_regex_extracts(module, name, params.get("regex_extracts")),
        )
    return overrides


def _parse_lookups(module: str, raw: Any) -> List[Lookup]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigError(f"Module {module}: lookups must be a list")

    lookups = []
    for entry in raw:
        if not isinstance(entry, dict):
            raise ConfigError(f"Module {module}: lookup entries must be mappings")
        old_index = entry.get("old_index")
        new_index = entry.get("new_index")
        if not old_index or not new_index:
            raise ConfigError(
                f"Module {module}: lookups need both old_index and new_index"
            )
        lookups.append(Lookup(old_index=str(old_index), new_index=str(new_index)))
    return lookups


def parse_module_request(name: str, raw: Any) -> ModuleRequest:
    """Validate one module's settings and build its request."""
    raw = _plain(raw) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Module {name}: settings must be a mapping")

    walk = raw.get("walk") or []
    if not isinstance(walk, list):
        raise ConfigError(f"Module {name}: walk must be a list")
    for oid in walk:
        # YAML reads an unquoted 1.30 as the float 1.3.
        if not isinstance(oid, str):
            raise ConfigError(
                f"Module {name}: walk entry {oid!r} is not a string, quote numeric OIDs"
            )

    return ModuleRequest(
        walk=list(walk),
        overrides=_parse_overrides(name, raw.get("overrides")),
        lookups=_parse_lookups(name, raw.get("lookups")),
    )


def load_module_requests(modules: Any) -> Dict[str, ModuleRequest]:
    """Build a request for every entry of the ``modules`` mapping."""
    modules = _plain(modules)
    if not modules:
        raise ConfigError("No modules configured")
    if not isinstance(modules, dict):
        raise ConfigError("modules must be a mapping of module name to settings")
    return {name: parse_module_request(name, raw) for name, raw in modules.items()}
