"""Unit tests for the daily renewal scheduler."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from apscheduler.triggers.cron import CronTrigger

from app.scheduler import MembershipRenewalScheduler


@pytest.fixture
def renewal_service():
    service = MagicMock()
    service.run_sweep = AsyncMock(return_value={"errors": []})
    return service


@pytest.fixture
def scheduler(renewal_service):
    return MembershipRenewalScheduler(renewal_service)


class TestScheduling:
    @pytest.mark.asyncio
    async def test_registers_single_daily_job_at_midnight_utc(self, scheduler):
        scheduler.start()
        try:
            jobs = scheduler.scheduler.get_jobs()
            assert len(jobs) == 1

            job = jobs[0]
            assert job.id == MembershipRenewalScheduler.JOB_ID
            assert job.max_instances == 1
            assert job.coalesce is True
            assert isinstance(job.trigger, CronTrigger)

            fields = {f.name: str(f) for f in job.trigger.fields}
            assert fields["hour"] == "0"
            assert fields["minute"] == "0"
            assert str(job.trigger.timezone) == "UTC"

            next_run = scheduler.next_run_time()
            assert (next_run.hour, next_run.minute, next_run.second) == (0, 0, 0)
        finally:
            scheduler.shutdown()

    @pytest.mark.asyncio
    async def test_shutdown_stops_scheduler(self, scheduler):
        scheduler.start()
        assert scheduler.running is True

        scheduler.shutdown()

        assert scheduler.running is False
        assert scheduler.next_run_time() is None

    def test_shutdown_before_start_is_harmless(self, scheduler):
        scheduler.shutdown()
        assert scheduler.running is False


class TestJobBody:
    @pytest.mark.asyncio
    async def test_job_runs_one_sweep(self, scheduler, renewal_service):
        await scheduler._run_sweep()

        renewal_service.run_sweep.assert_awaited_once_with()

    @pytest.mark.asyncio
    async def test_job_tolerates_sweep_errors(self, scheduler, renewal_service):
        renewal_service.run_sweep.return_value = {"errors": ["Failed to expire membership"]}

        await scheduler._run_sweep()

        renewal_service.run_sweep.assert_awaited_once()
