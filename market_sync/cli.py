"""Command-line entry point for the market-sync service."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence

import uvicorn

from market_sync.api.app import create_app
from market_sync.database.connection import get_connection, initialize_database
from market_sync.database.repository import find_records, get_record_count
from market_sync.errors import MarketSyncError
from market_sync.ingestion.job import run_configured_cycle
from market_sync.ingestion.scheduler import IngestionScheduler
from market_sync.utils.config import Settings
from market_sync.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)


def _serve(settings: Settings, args: argparse.Namespace) -> int:
    app = create_app(settings, run_scheduler=not args.no_scheduler)
    uvicorn.run(app, host=args.host or settings.api_host, port=args.port or settings.api_port)
    return 0


def _schedule(settings: Settings, args: argparse.Namespace) -> int:
    scheduler = IngestionScheduler(settings.job_schedule, lambda: run_configured_cycle(settings))
    if args.run_now:
        scheduler.run_cycle()
    logger.info("Next ingestion cycle at %s", scheduler.next_run().isoformat(timespec="seconds"))
    scheduler.run_forever()
    return 0


def _ingest_once(settings: Settings, args: argparse.Namespace) -> int:
    result = run_configured_cycle(settings)
    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.ok else 1


def _init_db(settings: Settings, args: argparse.Namespace) -> int:
    initialize_database(settings.db_path)
    print(f"Database initialized at {settings.db_path}")
    return 0


def _list(settings: Settings, args: argparse.Namespace) -> int:
    initialize_database(settings.db_path)
    conn = get_connection(settings.db_path)
    try:
        records = find_records(conn, title=args.title)
        total = get_record_count(conn)
    finally:
        conn.close()

    print(f"{'Market ID':<16} {'Event ID':<12} {'Event Name':<40} {'Title':<30}")
    print("-" * 100)
    for record in records:
        event_name = record.event_name or ""
        if len(event_name) > 38:
            event_name = event_name[:35] + "..."
        print(f"{record.market_id:<16} {record.event_id or '':<12} {event_name:<40} {record.title or '':<30}")
    print(f"\n{len(records)} of {total} records")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(prog="market-sync", description="Upstream market ingestion service")
    parser.add_argument("--env-file", default=None, help="dotenv file to load before reading settings")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API (and the ingestion scheduler)")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--no-scheduler", action="store_true", help="Serve the API without ingesting")
    serve.set_defaults(handler=_serve)

    schedule = subparsers.add_parser("schedule", help="Run the ingestion scheduler in the foreground")
    schedule.add_argument("--run-now", action="store_true", help="Run one cycle before waiting for the first slot")
    schedule.set_defaults(handler=_schedule)

    ingest = subparsers.add_parser("ingest-once", help="Run a single ingestion cycle and print its result")
    ingest.set_defaults(handler=_ingest_once)

    init_db = subparsers.add_parser("init-db", help="Create the record store schema")
    init_db.set_defaults(handler=_init_db)

    list_cmd = subparsers.add_parser("list", help="Print stored records")
    list_cmd.add_argument("--title", default=None, help="Case-insensitive title substring")
    list_cmd.set_defaults(handler=_list)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, configure logging and dispatch to a subcommand."""
    args = build_parser().parse_args(argv)
    try:
        settings = Settings.from_env(args.env_file)
        configure_logging(settings)
        return args.handler(settings, args)
    except MarketSyncError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
