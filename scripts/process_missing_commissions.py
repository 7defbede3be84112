#!/usr/bin/env python3
"""
Distribute commissions of paid purchases that were never distributed.

Usage:
    python scripts/process_missing_commissions.py               # All users
    python scripts/process_missing_commissions.py --user-id 42  # One user
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger

from commission_engine.config.logging import setup_logging
from commission_engine.config.settings import settings
from commission_engine.database import (
    create_engine_from_settings,
    create_session_maker,
)
from commission_engine.services.commission import (
    BackfillEntry,
    CommissionDistributionEngine,
    MissingCommissionProcessor,
)
from commission_engine.utils.exceptions import CommissionEngineError


def print_entry(entry: BackfillEntry) -> None:
    """Print one backfill result."""
    result = entry.result
    status = "OK" if result.success else f"FAILED ({result.error})"
    print(
        f"  user {entry.user_id} ({entry.name}, {entry.plan_type}): {status} "
        f"commissions={result.total_commissions} "
        f"platform={result.platform_amount} "
        f"paid={len(result.details)} skipped={len(result.skipped)}"
    )


async def run(user_id: int | None) -> int:
    """
    Run the backfill.

    Returns:
        Process exit code
    """
    engine = create_engine_from_settings(settings)
    session_maker = create_session_maker(engine)
    processor = MissingCommissionProcessor(
        session_maker,
        CommissionDistributionEngine.from_settings(session_maker, settings),
    )

    try:
        if user_id is not None:
            try:
                entries = [await processor.process_user(user_id)]
            except CommissionEngineError as e:
                logger.error(f"Cannot process user {user_id}: {e}")
                return 1
        else:
            entries = await processor.process_all()
    finally:
        await engine.dispose()

    print(f"Processed missing commissions for {len(entries)} users")
    for entry in entries:
        print_entry(entry)

    failed = sum(1 for entry in entries if not entry.result.success)
    return 1 if failed else 0


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Process missing commissions for paid purchases"
    )
    parser.add_argument(
        "--user-id",
        type=int,
        default=None,
        help="Process only this user",
    )
    args = parser.parse_args()

    setup_logging(settings.log_level, settings.log_file)
    sys.exit(asyncio.run(run(args.user_id)))


if __name__ == "__main__":
    main()
