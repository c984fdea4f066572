"""
Membership renewal sweep.

Runs once a day and makes two independent passes over the clients
collection:

1. Reminders: active memberships ending within the reminder window get a
   renewal email, subject to RenewalPolicy de-duplication. The send happens
   before the notification timestamp is saved, so a failed save can lead to
   a duplicate reminder on the next run but never to a silent miss.
2. Enforcement: active memberships whose end date has passed are set to
   expired. No email is sent for this transition.

Each client is processed in isolation; a failure is logged and recorded in
the results and the sweep moves on to the next client.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import ValidationError

from app.models.client import ClientRecord, as_utc
from app.services.email.email_service import EmailService, EmailTemplate
from app.services.membership.client_repository import ClientRepository
from app.services.membership.queries import (
    expiring_memberships_query,
    expired_memberships_query,
)
from app.services.membership.renewal_policy import RenewalPolicy
from config.renewal_config import RENEWAL_DEFAULTS

logger = logging.getLogger(__name__)


class MembershipRenewalService:
    """
    Sends renewal reminders and expires lapsed memberships.
    """

    def __init__(
        self,
        repository: ClientRepository,
        email_service: EmailService,
        policy: Optional[RenewalPolicy] = None,
        notify_max_attempts: int = RENEWAL_DEFAULTS["notify_max_attempts"],
        notify_retry_backoff_seconds: float = RENEWAL_DEFAULTS["notify_retry_backoff_seconds"],
        sweep_timeout_seconds: Optional[float] = RENEWAL_DEFAULTS["sweep_timeout_seconds"],
    ):
        """
        Initialize MembershipRenewalService.

        Args:
            repository: Client membership persistence
            email_service: Sends the renewal reminder template
            policy: Reminder de-duplication rule
            notify_max_attempts: Dispatch attempts per client (1 disables retry)
            notify_retry_backoff_seconds: Linear backoff unit between attempts
            sweep_timeout_seconds: Upper bound on each pass of a sweep (None for no bound)
        """
        if notify_max_attempts < 1:
            raise ValueError("notify_max_attempts must be at least 1")

        self._repository = repository
        self._email_service = email_service
        self._policy = policy or RenewalPolicy()
        self._notify_max_attempts = notify_max_attempts
        self._notify_retry_backoff = notify_retry_backoff_seconds
        self._sweep_timeout = sweep_timeout_seconds
        self._lock = asyncio.Lock()

    @property
    def policy(self) -> RenewalPolicy:
        return self._policy

    @property
    def is_running(self) -> bool:
        """True while a sweep is in progress."""
        return self._lock.locked()

    async def run_sweep(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Execute one full sweep.

        Never raises; failures are logged and listed under "errors".
        A call made while another sweep is running does nothing and
        returns with "skipped" set.

        Args:
            now: Reference time for both passes (defaults to current UTC time)

        Returns:
            Dict with counters, timings and errors
        """
        now = as_utc(now) if now else datetime.now(timezone.utc)
        results = self._new_results(now)

        if self._lock.locked():
            logger.warning("Membership renewal sweep already in progress, skipping")
            results["skipped"] = True
            return self._finish(results)

        async with self._lock:
            logger.info(f"Starting membership renewal sweep at {now.isoformat()}")
            await self._run_pass("Reminder", self.send_expiry_reminders(now, results), results)
            await self._run_pass("Expiry", self.expire_memberships(now, results), results)

        self._finish(results)
        logger.info(
            f"Membership renewal check completed. "
            f"Reminders sent: {results['remindersSent']}, "
            f"Memberships expired: {results['membershipsExpired']}, "
            f"Errors: {len(results['errors'])}"
        )
        return results

    async def _run_pass(self, name: str, pass_coro, results: Dict[str, Any]) -> None:
        """Run one pass under its own timeout; a timeout ends only that pass."""
        try:
            await asyncio.wait_for(pass_coro, timeout=self._sweep_timeout)
        except asyncio.TimeoutError:
            error_msg = f"{name} pass timed out after {self._sweep_timeout} seconds"
            logger.error(error_msg)
            results["errors"].append(error_msg)

    # ─────────────────────────────────────────────────────────────────
    # Pass A: reminders
    # ─────────────────────────────────────────────────────────────────

    async def send_expiry_reminders(
        self,
        now: datetime,
        results: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Remind clients whose active membership ends within the window.

        Args:
            now: Reference time
            results: Results dict to accumulate into (a fresh one if omitted)

        Returns:
            The results dict
        """
        results = results if results is not None else self._new_results(now)
        query = expiring_memberships_query(now, self._policy.reminder_window)

        try:
            clients = await self._repository.find(query)
        except Exception as e:
            error_msg = f"Reminder pass aborted, could not load clients: {e}"
            logger.error(error_msg)
            results["errors"].append(error_msg)
            return results

        logger.info(
            f"Found {len(clients)} memberships expiring in the next "
            f"{self._policy.reminder_window.days} days"
        )

        for doc in clients:
            record = self._parse_client(doc, results)
            if record is None:
                continue

            if not record.email:
                logger.warning(f"Skipping client {record.id}: no email address")
                results["malformedSkipped"] += 1
                continue

            if not self._policy.should_send_reminder(record.membership, now):
                results["remindersSkipped"] += 1
                continue

            try:
                sent = await self._dispatch_reminder(record)
            except Exception as e:
                error_msg = f"Failed to send renewal reminder to client {record.id}: {e}"
                logger.error(error_msg)
                results["remindersFailed"] += 1
                results["errors"].append(error_msg)
                continue

            if not sent:
                error_msg = f"Renewal reminder to client {record.id} was not delivered"
                logger.error(error_msg)
                results["remindersFailed"] += 1
                results["errors"].append(error_msg)
                continue

            results["remindersSent"] += 1
            logger.info(f"Sent renewal notification to {record.name} ({record.email})")

            try:
                await self._repository.mark_renewal_notified(record.id, now)
            except Exception as e:
                error_msg = f"Reminder sent to client {record.id} but notification time not saved: {e}"
                logger.error(error_msg)
                results["errors"].append(error_msg)

        return results

    async def _dispatch_reminder(self, record: ClientRecord) -> bool:
        """Send the reminder, retrying with linear backoff."""
        membership = record.membership
        data = {
            "clientName": record.name,
            "endDate": membership.end_date,
            "planType": membership.plan.value,
        }

        for attempt in range(1, self._notify_max_attempts + 1):
            try:
                if await self._email_service.send_template(
                    record.email, EmailTemplate.MEMBERSHIP_RENEWAL, data
                ):
                    return True
                logger.warning(
                    f"Renewal reminder to {record.email} not accepted "
                    f"(attempt {attempt}/{self._notify_max_attempts})"
                )
            except Exception as e:
                if attempt == self._notify_max_attempts:
                    raise
                logger.warning(
                    f"Renewal reminder to {record.email} raised {e!r} "
                    f"(attempt {attempt}/{self._notify_max_attempts})"
                )

            if attempt < self._notify_max_attempts:
                await asyncio.sleep(self._notify_retry_backoff * attempt)

        return False

    # ─────────────────────────────────────────────────────────────────
    # Pass B: enforcement
    # ─────────────────────────────────────────────────────────────────

    async def expire_memberships(
        self,
        now: datetime,
        results: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Set active memberships that ended strictly before `now` to expired.

        Args:
            now: Reference time
            results: Results dict to accumulate into (a fresh one if omitted)

        Returns:
            The results dict
        """
        results = results if results is not None else self._new_results(now)

        try:
            clients = await self._repository.find(expired_memberships_query(now))
        except Exception as e:
            error_msg = f"Expiry pass aborted, could not load clients: {e}"
            logger.error(error_msg)
            results["errors"].append(error_msg)
            return results

        logger.info(f"Found {len(clients)} expired memberships")

        for doc in clients:
            record = self._parse_client(doc, results)
            if record is None:
                continue

            try:
                changed = await self._repository.expire_membership(record.id, now)
            except Exception as e:
                error_msg = f"Failed to expire membership of client {record.id}: {e}"
                logger.error(error_msg)
                results["errors"].append(error_msg)
                continue

            if changed:
                results["membershipsExpired"] += 1
                logger.info(f"Updated {record.name}'s membership status to EXPIRED")
            else:
                logger.info(f"Membership of client {record.id} changed since it was read, left as is")

        return results

    # ─────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────

    def _parse_client(
        self,
        doc: Dict[str, Any],
        results: Dict[str, Any],
    ) -> Optional[ClientRecord]:
        try:
            return ClientRecord.model_validate(doc)
        except ValidationError as e:
            logger.warning(
                f"Skipping client {doc.get('_id')}: malformed membership "
                f"({e.error_count()} validation errors)"
            )
            results["malformedSkipped"] += 1
            return None

    @staticmethod
    def _new_results(now: datetime) -> Dict[str, Any]:
        return {
            "startTime": datetime.now(timezone.utc).isoformat(),
            "sweepTime": now.isoformat(),
            "skipped": False,
            "remindersSent": 0,
            "remindersSkipped": 0,
            "remindersFailed": 0,
            "membershipsExpired": 0,
            "malformedSkipped": 0,
            "errors": [],
        }

    @staticmethod
    def _finish(results: Dict[str, Any]) -> Dict[str, Any]:
        end_time = datetime.now(timezone.utc)
        results["endTime"] = end_time.isoformat()
        results["durationSeconds"] = (
            end_time - datetime.fromisoformat(results["startTime"])
        ).total_seconds()
        return results
