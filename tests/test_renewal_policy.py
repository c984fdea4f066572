"""Unit tests for the renewal reminder de-duplication rule."""

import pytest
from datetime import datetime, timedelta, timezone

from app.models.client import Membership
from app.services.membership.renewal_policy import RenewalPolicy


NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def _membership(ends_in: timedelta, last_sent_ago=None) -> Membership:
    return Membership(
        startDate=NOW - timedelta(days=30),
        endDate=NOW + ends_in,
        lastRenewalNotification=(NOW - last_sent_ago) if last_sent_ago is not None else None,
    )


@pytest.fixture
def policy():
    return RenewalPolicy()


class TestShouldSendReminder:
    def test_never_notified_is_due(self, policy):
        assert policy.should_send_reminder(_membership(timedelta(days=6)), NOW) is True

    def test_notified_and_more_than_a_day_left_is_not_due(self, policy):
        membership = _membership(timedelta(days=2), last_sent_ago=timedelta(days=5))
        assert policy.should_send_reminder(membership, NOW) is False

    def test_final_day_with_stale_reminder_is_due(self, policy):
        membership = _membership(timedelta(hours=12), last_sent_ago=timedelta(days=2))
        assert policy.should_send_reminder(membership, NOW) is True

    def test_final_day_with_recent_reminder_is_not_due(self, policy):
        membership = _membership(timedelta(hours=12), last_sent_ago=timedelta(hours=23))
        assert policy.should_send_reminder(membership, NOW) is False

    def test_interval_must_be_strictly_exceeded(self, policy):
        membership = _membership(timedelta(hours=12), last_sent_ago=timedelta(days=1))
        assert policy.should_send_reminder(membership, NOW) is False

    def test_exactly_one_day_left_counts_as_final_day(self, policy):
        membership = _membership(timedelta(days=1), last_sent_ago=timedelta(days=6))
        assert policy.should_send_reminder(membership, NOW) is True

    def test_custom_threshold(self):
        policy = RenewalPolicy(renotify_threshold_days=3)
        membership = _membership(timedelta(days=3), last_sent_ago=timedelta(days=4))
        assert policy.should_send_reminder(membership, NOW) is True

    def test_defaults(self, policy):
        assert policy.reminder_window == timedelta(days=7)
        assert policy.renotify_threshold_days == 1
        assert policy.renotify_min_interval == timedelta(days=1)
