"""Entry point and pipeline for the CTFd user sync.

Run sequence:
1. Load configuration (.env + environment) and set up logging.
2. Connect to Google Sheets with the service account.
3. List user ids from CTFd, then fetch each user's detail record.
4. Overwrite the staging range with all rows in one update.

All errors are fatal. They propagate as ``SyncError`` to ``main``, which
alerts the Discord webhook and exits 1. Any other exception is alerted as
"Unexpected error" the same way.
"""
import argparse
from typing import List, Optional

from .alerts import AlertSink
from .config import Config
from .ctfd import CTFdClient
from .data import GoogleSheetsData
from .exceptions import ConfigError, SyncError
from .logging_utils import get_logger, setup_logger, setup_logger_from_config
from .models import UserRecord


def collect_records(ctfd: CTFdClient) -> List[UserRecord]:
    """Fetch every listed user's record, in listing order."""
    user_ids = ctfd.list_user_ids()
    records = ctfd.get_user_records(user_ids)
    get_logger().info(f"Number of users: {len(records)}")
    return records


def run_sync(
    config: Config,
    ctfd: Optional[CTFdClient] = None,
    sheets: Optional[GoogleSheetsData] = None,
    dry_run: bool = False,
) -> int:
    """Run one sync and return the number of rows written (or that would be)."""
    config.validate()

    if sheets is None and not dry_run:
        sheets = GoogleSheetsData.from_config(config).connect()

    owns_client = ctfd is None
    ctfd = ctfd or CTFdClient.from_config(config)
    try:
        records = collect_records(ctfd)
    finally:
        if owns_client:
            ctfd.close()

    rows = [record.to_row() for record in records]
    if dry_run:
        log = get_logger()
        log.info(f"Dry run: skipping write of {len(rows)} rows to {config['SHEET_WRITE_RANGE']}")
        for row in rows:
            log.debug(f"Row: {row}")
        return len(rows)

    sheets.overwrite_rows(rows)
    return len(rows)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ctfd-sync",
        description="Copy CTFd user profiles into the staging Google Sheet.",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file (default: .env)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch users but don't write to the sheet",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = Config(env_file=args.env_file)
    except ConfigError as e:
        # No webhook settings yet, so this one is only logged.
        setup_logger().error(str(e))
        return 1

    log = setup_logger_from_config(config)
    sink = AlertSink.from_config(config)

    try:
        count = run_sync(config, dry_run=args.dry_run)
    except SyncError as e:
        sink.alert_and_exit(e.message, e.cause if e.cause is not None else e)
    except Exception as e:
        log.exception("Unexpected error during sync")
        sink.alert_and_exit("Unexpected error", e)

    sink.close()
    log.info(f"Sync complete: {count} users")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
