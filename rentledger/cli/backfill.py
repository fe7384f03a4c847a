"""CLI entry point for backfilling rent periods.

Materializes missing rent periods for every lease, e.g. for leases created
before the ledger existed. Safe to run repeatedly.

Usage:
    python -m rentledger.cli.backfill
    python -m rentledger.cli.backfill --as-of 2024-06-30

Exit Codes:
    0 - Success: every lease processed
    1 - Failure: at least one lease could not be processed
"""

import argparse
import logging
import sys
from datetime import date

from dotenv import load_dotenv

from rentledger.config import settings
from rentledger.services.errors import LedgerError
from rentledger.services.logging import setup_server_logging

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Backfill rent periods for all leases")
    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=None,
        help="Materialization date, YYYY-MM-DD (default: today)",
    )
    return parser.parse_args(argv)


def backfill(db, as_of: date) -> tuple[int, int]:
    """Run ensure_periods for every lease.

    Args:
        db: Database session
        as_of: Materialization date

    Returns:
        Tuple of (periods created, leases failed)
    """
    from rentledger.services.wiring import build_ledger_services

    services = build_ledger_services(db)
    created = 0
    failed = 0
    for lease in services.ledger.leases.list_leases():
        try:
            created += len(services.ledger.ensure_periods(lease, as_of))
        except LedgerError as e:
            failed += 1
            logger.error("Backfill failed for lease %d: %s", lease.id, e.message)
    return created, failed


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the backfill CLI.

    Returns:
        Exit code: 0 for success, 1 for failure
    """
    load_dotenv()
    args = parse_args(argv)
    setup_server_logging(settings.log_level, settings.log_file)
    as_of = args.as_of or date.today()

    try:
        from rentledger.services import SessionLocal

        db = SessionLocal()
        try:
            logger.info("Backfilling rent periods as of %s...", as_of)
            created, failed = backfill(db, as_of)
        finally:
            db.close()
    except KeyboardInterrupt:
        logger.warning("Backfill interrupted by user")
        return 1
    except LedgerError as e:
        logger.error("Backfill failed: %s", e.message, exc_info=True)
        return 1

    logger.info("Backfill complete: %d periods created, %d leases failed", created, failed)
    return 0 if failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
