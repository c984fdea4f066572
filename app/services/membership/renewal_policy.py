"""
Reminder de-duplication rule for membership renewal emails.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from app.models.client import Membership
from config.renewal_config import RENEWAL_DEFAULTS


@dataclass(frozen=True)
class RenewalPolicy:
    """
    When a renewal reminder is due.

    A client is reminded once on entering the reminder window. Inside the
    last `renotify_threshold_days` they are reminded again, at most once
    per `renotify_min_interval`.
    """
    reminder_window: timedelta = timedelta(days=RENEWAL_DEFAULTS["reminder_window_days"])
    renotify_threshold_days: int = RENEWAL_DEFAULTS["renotify_threshold_days"]
    renotify_min_interval: timedelta = timedelta(days=RENEWAL_DEFAULTS["renotify_min_interval_days"])

    def should_send_reminder(self, membership: Membership, now: datetime) -> bool:
        last_sent = membership.last_renewal_notification
        if last_sent is None:
            return True

        if membership.days_until_expiry(now) > self.renotify_threshold_days:
            return False

        return now - last_sent > self.renotify_min_interval
