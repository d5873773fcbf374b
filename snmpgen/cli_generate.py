"""CLI for generating exporter modules from a MIB tree and generator.yml."""

from __future__ import annotations

import argparse
import sys
from typing import Dict, Iterable

from snmpgen.app_config import DEFAULT_CONFIG_PATH, AppConfig
from snmpgen.app_logger import AppLogger
from snmpgen.config_loader import load_module_requests
from snmpgen.errors import ConfigError, GenerationError, TreeLoadError
from snmpgen.generator import ConfigGenerator
from snmpgen.models import Module, ModuleRequest, Node
from snmpgen.tree_loader import load_tree_from_json, load_tree_from_mibs, write_tree_json
from snmpgen.writer import write_modules

logger = AppLogger.get(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate SNMP exporter modules (walk/get OIDs and metrics) "
        "from a MIB node tree and the modules configured in generator.yml.",
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Generator config file (default: {DEFAULT_CONFIG_PATH})",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--tree", help="JSON dump of the MIB node tree")
    source.add_argument(
        "--mib",
        action="append",
        help="pysnmp compiled MIB module to load (repeatable)",
    )
    parser.add_argument(
        "--mib-dir",
        action="append",
        default=[],
        help="Directory of compiled MIB modules (repeatable)",
    )
    parser.add_argument(
        "--output", default="snmp.yml", help="Output file (default: snmp.yml)"
    )
    parser.add_argument(
        "--module",
        action="append",
        help="Only generate the named module (repeatable)",
    )
    parser.add_argument(
        "--dump-tree",
        help="Also write the loaded MIB tree as JSON (reusable with --tree)",
    )
    parser.add_argument("--log-level", default=None, help="Override logger level")
    return parser


def _select_modules(
    requests: Dict[str, ModuleRequest], names: Iterable[str] | None
) -> Dict[str, ModuleRequest]:
    if not names:
        return requests
    missing = [n for n in names if n not in requests]
    if missing:
        raise ConfigError(f"Unknown module(s): {', '.join(missing)}")
    return {n: requests[n] for n in names}


def _load_tree(args: argparse.Namespace) -> Node:
    if args.tree:
        return load_tree_from_json(args.tree)
    return load_tree_from_mibs(args.mib, args.mib_dir)


def main(argv: Iterable[str] | None = None) -> int:
    args = _build_parser().parse_args(list(argv) if argv is not None else None)

    try:
        config = AppConfig(args.config)
    except (FileNotFoundError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    AppLogger.configure(config, level=args.log_level)

    try:
        requests = _select_modules(load_module_requests(config.get("modules")), args.module)
        root = _load_tree(args)
        if args.dump_tree:
            dumped = write_tree_json(args.dump_tree, root)
            logger.info(f"MIB tree written to {dumped}")
        modules: Dict[str, Module] = ConfigGenerator(root).generate_all(requests)
    except (ConfigError, TreeLoadError) as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except GenerationError as e:
        logger.error(f"Failed to generate module {e.module}: {e}")
        print(f"Error: module {e.module}: {e}", file=sys.stderr)
        return 1

    path = write_modules(args.output, modules)
    logger.info(f"Config written to {path}")
    print(f"Config written to {path}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
