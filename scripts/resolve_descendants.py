#!/usr/bin/env python3
"""
Resolve which candidate nodes lie under the included location nodes.
Runs a genealogist against a DTree database and prints the matches and
the cache statistics, optionally repeating the batch to show cache reuse.

With --config, the genealogy and logging sections of a connector config
file supply the settings; explicit options still take precedence.
"""

import os
import sys
import json
import time
import argparse
import logging

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import ConnectorConfig, GenealogistConfig
from config.database import DatabaseConfig, DatabaseType, db_factory, initialize_database, close_database
from genealogy import GENEALOGISTS, GenealogyError, genealogist_from_config, split_ids
from indexer.parent_gateway import SqlParentGateway
from observability.logging import setup_logging, setup_logging_from_config

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resolve DTree descendants of the included nodes")
    parser.add_argument("--db", required=True, help="SQLite database path")
    parser.add_argument("--config", help="Connector config file")
    parser.add_argument("--included", help="Comma-separated included location nodes")
    parser.add_argument("--excluded", help="Comma-separated excluded location nodes")
    parser.add_argument("--genealogist", help=f"One of {', '.join(sorted(GENEALOGISTS))}")
    parser.add_argument("--candidates", required=True, help="Comma-separated candidate node ids")
    parser.add_argument("--min-cache-size", type=int)
    parser.add_argument("--max-cache-size", type=int)
    parser.add_argument("--repeat", type=int, default=1, help="Number of times to resolve the batch")
    parser.add_argument("--json", action="store_true", help="Print the results as JSON")
    parser.add_argument("--log-level", help="Logging level (default WARNING)")
    return parser.parse_args(argv)


def load_settings(args: argparse.Namespace) -> GenealogistConfig:
    """Merge the config file's genealogy section with explicit options.

    Raises:
        ConfigurationError: If the file or the merged settings are invalid
    """
    if args.config:
        connector_config = ConnectorConfig(args.config)
        if args.log_level:
            setup_logging(level=args.log_level)
        else:
            setup_logging_from_config(connector_config)
        settings = connector_config.genealogist_config().model_dump()
    else:
        setup_logging(level=args.log_level or "WARNING")
        settings = {}

    overrides = {
        'genealogist': args.genealogist,
        'included_location_nodes': args.included,
        'excluded_location_nodes': args.excluded,
        'min_cache_size': args.min_cache_size,
        'max_cache_size': args.max_cache_size,
    }
    settings.update({key: value for key, value in overrides.items() if value is not None})
    return GenealogistConfig.from_dict(settings)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        settings = load_settings(args)
    except GenealogyError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    if not os.path.exists(args.db):
        print(f"❌ Database not found: {args.db}", file=sys.stderr)
        return 2

    try:
        candidates = split_ids(args.candidates)
    except ValueError as e:
        print(f"❌ Invalid candidates: {e}", file=sys.stderr)
        return 2

    initialize_database(DatabaseConfig(type=DatabaseType.SQLITE, sqlite_path=args.db))
    session = db_factory.get_session()
    runs = []
    try:
        genealogist = genealogist_from_config(settings, SqlParentGateway(session))
        for run in range(max(args.repeat, 1)):
            before = genealogist.statistics()
            start_time = time.perf_counter()
            matching = genealogist.resolve(candidates)
            duration = time.perf_counter() - start_time
            runs.append({
                "run": run + 1,
                "matching": matching,
                "duration_ms": round(duration * 1000, 3),
                "statistics": genealogist.statistics().since(before).to_dict()
            })
        total = genealogist.statistics()
    except GenealogyError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    finally:
        session.close()
        close_database()

    if args.json:
        print(json.dumps({
            "genealogist": genealogist.name,
            "runs": runs,
            "statistics": total.to_dict()
        }, indent=2))
    else:
        for run in runs:
            print(f"Run {run['run']}: [{run['matching']}] ({run['duration_ms']}ms, "
                  f"{run['statistics']['query_count']} queries)")
        print(f"Statistics: {total}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
