"""Unit tests for the typed client query builders."""

import pytest
from datetime import datetime, timedelta, timezone

from app.models.client import MembershipStatus
from app.services.membership.queries import (
    ClientQuery,
    combine,
    end_date_before,
    end_date_between,
    expired_memberships_query,
    expiring_memberships_query,
    status_equals,
)


NOW = datetime(2026, 3, 10, tzinfo=timezone.utc)


class TestBuilders:
    def test_status_equals(self):
        assert status_equals(MembershipStatus.ACTIVE).to_mongo() == {"membership.status": "active"}

    def test_end_date_between(self):
        later = NOW + timedelta(days=7)
        assert end_date_between(NOW, later).to_mongo() == {
            "membership.endDate": {"$gte": NOW, "$lte": later}
        }

    def test_end_date_between_rejects_inverted_range(self):
        with pytest.raises(ValueError):
            end_date_between(NOW, NOW - timedelta(seconds=1))

    def test_end_date_before(self):
        assert end_date_before(NOW).to_mongo() == {"membership.endDate": {"$lt": NOW}}

    def test_empty_query_matches_everything(self):
        assert ClientQuery().to_mongo() == {}


class TestCombine:
    def test_merges_independent_filters(self):
        query = combine(status_equals(MembershipStatus.EXPIRED), end_date_before(NOW))
        assert query == ClientQuery(status=MembershipStatus.EXPIRED, end_date_before=NOW)

    def test_same_value_twice_is_allowed(self):
        query = combine(status_equals(MembershipStatus.ACTIVE), status_equals(MembershipStatus.ACTIVE))
        assert query.status == MembershipStatus.ACTIVE

    def test_conflicting_values_raise(self):
        with pytest.raises(ValueError):
            combine(status_equals(MembershipStatus.ACTIVE), status_equals(MembershipStatus.EXPIRED))


class TestPassQueries:
    def test_expiring_memberships_query(self):
        query = expiring_memberships_query(NOW, timedelta(days=7))
        assert query.to_mongo() == {
            "membership.status": "active",
            "membership.endDate": {"$gte": NOW, "$lte": NOW + timedelta(days=7)},
        }

    def test_expired_memberships_query(self):
        assert expired_memberships_query(NOW).to_mongo() == {
            "membership.status": "active",
            "membership.endDate": {"$lt": NOW},
        }
