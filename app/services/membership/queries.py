"""
Typed query builders for client membership lookups.

Each builder returns a ClientQuery holding one named filter; combine()
merges them and ClientQuery.to_mongo() renders the MongoDB filter.
"""

from dataclasses import dataclass, fields, replace
from datetime import datetime, timedelta
from typing import Optional, Dict, Any

from app.models.client import MembershipStatus

STATUS_FIELD = "membership.status"
END_DATE_FIELD = "membership.endDate"


@dataclass(frozen=True)
class ClientQuery:
    """Filter over the embedded membership of client documents."""
    status: Optional[MembershipStatus] = None
    end_date_from: Optional[datetime] = None  # inclusive
    end_date_to: Optional[datetime] = None  # inclusive
    end_date_before: Optional[datetime] = None  # exclusive

    def to_mongo(self) -> Dict[str, Any]:
        query: Dict[str, Any] = {}

        if self.status is not None:
            query[STATUS_FIELD] = self.status.value

        end_date: Dict[str, Any] = {}
        if self.end_date_from is not None:
            end_date["$gte"] = self.end_date_from
        if self.end_date_to is not None:
            end_date["$lte"] = self.end_date_to
        if self.end_date_before is not None:
            end_date["$lt"] = self.end_date_before
        if end_date:
            query[END_DATE_FIELD] = end_date

        return query


def status_equals(status: MembershipStatus) -> ClientQuery:
    return ClientQuery(status=status)


def end_date_between(start: datetime, end: datetime) -> ClientQuery:
    if end < start:
        raise ValueError("end_date_between: end must not precede start")
    return ClientQuery(end_date_from=start, end_date_to=end)


def end_date_before(cutoff: datetime) -> ClientQuery:
    return ClientQuery(end_date_before=cutoff)


def combine(*queries: ClientQuery) -> ClientQuery:
    """
    Merge queries into one that requires all of them.

    Raises:
        ValueError: If two queries set the same filter to different values
    """
    merged = ClientQuery()
    for query in queries:
        for field in fields(ClientQuery):
            value = getattr(query, field.name)
            if value is None:
                continue
            current = getattr(merged, field.name)
            if current is not None and current != value:
                raise ValueError(f"Conflicting values for filter '{field.name}'")
            merged = replace(merged, **{field.name: value})
    return merged


def expiring_memberships_query(now: datetime, window: timedelta) -> ClientQuery:
    """Active memberships ending within [now, now + window]."""
    return combine(
        status_equals(MembershipStatus.ACTIVE),
        end_date_between(now, now + window),
    )


def expired_memberships_query(now: datetime) -> ClientQuery:
    """Active memberships whose end date is strictly before now."""
    return combine(
        status_equals(MembershipStatus.ACTIVE),
        end_date_before(now),
    )
