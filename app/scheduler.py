"""
Daily trigger for the membership renewal sweep.
"""

import logging
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from app.services.membership.renewal_service import MembershipRenewalService
from config.renewal_config import RENEWAL_TRIGGER

logger = logging.getLogger(__name__)


class MembershipRenewalScheduler:
    """
    APScheduler manager for the renewal sweep.
    Fires once a day at midnight UTC.
    """

    JOB_ID = "membership_renewal_sweep"

    def __init__(self, renewal_service: MembershipRenewalService) -> None:
        self._renewal_service = renewal_service
        self.scheduler: Optional[AsyncIOScheduler] = None

    @property
    def running(self) -> bool:
        return self.scheduler is not None and self.scheduler.running

    def start(self) -> None:
        """Register the daily job and start the scheduler (needs a running event loop)."""
        self.scheduler = AsyncIOScheduler(timezone=RENEWAL_TRIGGER["timezone"])

        # One instance at a time; missed firings collapse into one run
        self.scheduler.add_job(
            self._run_sweep,
            CronTrigger(
                hour=RENEWAL_TRIGGER["hour"],
                minute=RENEWAL_TRIGGER["minute"],
                timezone=RENEWAL_TRIGGER["timezone"],
            ),
            id=self.JOB_ID,
            name="Daily Membership Renewal Sweep",
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )

        self.scheduler.start()
        logger.info("Scheduled membership renewal checks")

    def shutdown(self) -> None:
        """Stop the scheduler without waiting for a running sweep."""
        if self.scheduler and self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Membership renewal scheduler stopped")
        self.scheduler = None

    def next_run_time(self) -> Optional[datetime]:
        if not self.running:
            return None
        job = self.scheduler.get_job(self.JOB_ID)
        return job.next_run_time if job else None

    async def _run_sweep(self) -> None:
        results = await self._renewal_service.run_sweep()
        if results["errors"]:
            logger.warning(
                f"Renewal sweep finished with {len(results['errors'])} errors"
            )
