"""Command line entry for the inspection tool.

Commands:
- `wiring`: list every registered service and whether it is built yet
- `stats`: print dashboard statistics as YAML
- `seed`: insert the demo bill

Wiring errors abort with exit code 2; domain errors with exit code 1.
"""
from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import Iterable, Optional

import yaml

from inspection_lib.bootstrap import bootstrap_server
from inspection_lib.dashboard import DashboardService
from inspection_lib.logging_config import configure_logging
from inspection_lib.main import Config, create_registry
from inspection_lib.services import CyclicDependencyError, UnregisteredTypeError

DEFAULT_CONFIG = "data/config/server_config.yml"


def get_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="inspection", description="Cashew shipment inspection tool")
    p.add_argument("--config", default=DEFAULT_CONFIG, help="Path to the YAML server config")
    p.add_argument("--data-dir", default=None, help="Override the data directory")
    p.add_argument("--backend", choices=["file", "memory"], default=None, help="Override the storage backend")
    p.add_argument("command", choices=["wiring", "stats", "seed"], help="Action to run")
    return p


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = get_parser().parse_args(list(argv) if argv is not None else None)
    config_path = Path(args.config)
    logger = configure_logging(config_path)

    try:
        server_cfg = bootstrap_server(config_path, logger)
    except ValueError as e:
        print(f"Failed to load config: {e}", file=sys.stderr)
        return 1
    config = Config.from_server_config(server_cfg, data_dir=args.data_dir, storage_backend=args.backend)
    registry = create_registry(config)

    try:
        if args.command == "wiring":
            for name, state in registry.registrations().items():
                print(f"{name}: {state}")
        elif args.command == "stats":
            stats = registry.resolve(DashboardService).get_statistics()
            sys.stdout.write(yaml.safe_dump(stats, sort_keys=False, allow_unicode=True))
        elif args.command == "seed":
            from inspection_lib.seed import seed_demo_data
            result = seed_demo_data(registry)
            print(f"Demo bill {result['bill_id']} {'created' if result['created'] else 'already present'}")
    except (UnregisteredTypeError, CyclicDependencyError) as e:
        logger.error("Service wiring error: %s", e)
        print(f"Wiring error: {e}", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def main_entry() -> None:
    sys.exit(main())
