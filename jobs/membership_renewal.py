"""
Membership renewal background job.

Sends renewal reminders for memberships about to expire and marks lapsed
memberships as expired. The API process already runs this daily at
midnight UTC; this module runs a single sweep immediately.

Usage:
    Run via CRON (only when the API scheduler is not running):
        0 0 * * * cd /path/to/project && python -m jobs.membership_renewal

    Or run directly:
        python -m jobs.membership_renewal
"""

import asyncio
import logging
import sys
from typing import Any, Dict

from app.config import settings
from app.dependencies import build_email_service, build_renewal_service
from app.models import Client
from common.database import MongoDB

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


async def run_once() -> Dict[str, Any]:
    """Connect, run one sweep, disconnect."""
    database = MongoDB()
    await database.connect(
        uri=settings.MONGODB_URI,
        database_name=settings.MONGODB_DATABASE,
        document_models=[Client],
    )

    try:
        renewal_service = build_renewal_service(database.db, build_email_service(settings))
        return await renewal_service.run_sweep()
    finally:
        await database.disconnect()


def print_results(results: Dict[str, Any]) -> None:
    print("\n=== Membership Renewal Job Results ===")
    print(f"Start Time: {results['startTime']}")
    print(f"End Time: {results['endTime']}")
    print(f"Duration: {results['durationSeconds']:.2f} seconds")
    print(f"Reminders Sent: {results['remindersSent']}")
    print(f"Reminders Skipped (already notified): {results['remindersSkipped']}")
    print(f"Reminders Failed: {results['remindersFailed']}")
    print(f"Memberships Expired: {results['membershipsExpired']}")
    print(f"Malformed Records Skipped: {results['malformedSkipped']}")

    if results["errors"]:
        print(f"\nErrors ({len(results['errors'])}):")
        for error in results["errors"]:
            print(f"  - {error}")


async def main():
    """Main entry point for the membership renewal job."""
    results = await run_once()
    print_results(results)
    sys.exit(1 if results["errors"] else 0)


if __name__ == "__main__":
    asyncio.run(main())
