"""Shared test fixtures for gym management backend tests."""

import copy
import pytest
from datetime import datetime, timezone, timedelta
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId

from app.services.membership.queries import ClientQuery


NOW = datetime(2026, 3, 10, 0, 0, tzinfo=timezone.utc)


class InMemoryClientRepository:
    """
    Stands in for ClientRepository: same interface, documents held in a dict.
    Mirrors the conditional update semantics of the real repository.
    """

    def __init__(self, docs: Optional[List[Dict[str, Any]]] = None):
        self.docs: Dict[Any, Dict[str, Any]] = {}
        for doc in docs or []:
            self.add(doc)
        self.find_calls: List[ClientQuery] = []

    def add(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        self.docs[doc["_id"]] = doc
        return doc

    def get(self, client_id: Any) -> Dict[str, Any]:
        return self.docs[client_id]

    @staticmethod
    def _matches(doc: Dict[str, Any], query: ClientQuery) -> bool:
        membership = doc.get("membership") or {}
        end_date = membership.get("endDate")

        if query.status is not None and membership.get("status") != query.status.value:
            return False
        bounds = (query.end_date_from, query.end_date_to, query.end_date_before)
        if any(b is not None for b in bounds) and not isinstance(end_date, datetime):
            return False
        if query.end_date_from is not None and end_date < query.end_date_from:
            return False
        if query.end_date_to is not None and end_date > query.end_date_to:
            return False
        if query.end_date_before is not None and end_date >= query.end_date_before:
            return False
        return True

    async def find(self, query: ClientQuery) -> List[Dict[str, Any]]:
        self.find_calls.append(query)
        return [copy.deepcopy(d) for d in self.docs.values() if self._matches(d, query)]

    async def mark_renewal_notified(self, client_id: Any, notified_at: datetime) -> bool:
        doc = self.docs.get(client_id)
        if doc is None:
            return False
        doc["membership"]["lastRenewalNotification"] = notified_at
        return True

    async def expire_membership(self, client_id: Any, now: datetime) -> bool:
        doc = self.docs.get(client_id)
        if doc is None:
            return False
        membership = doc["membership"]
        if membership["status"] != "active" or not membership["endDate"] < now:
            return False
        membership["status"] = "expired"
        return True


def make_client_doc(
    end_date: datetime,
    status: str = "active",
    last_notification: Optional[datetime] = None,
    name: str = "Anna Svensson",
    email: Optional[str] = "anna@example.com",
    plan: str = "monthly",
    start_date: Optional[datetime] = None,
) -> Dict[str, Any]:
    membership = {
        "plan": plan,
        "startDate": start_date or (end_date - timedelta(days=30)),
        "endDate": end_date,
        "status": status,
        "amount": 49.0,
    }
    if last_notification is not None:
        membership["lastRenewalNotification"] = last_notification

    doc = {
        "_id": ObjectId(),
        "name": name,
        "phone": "+46700000000",
        "membership": membership,
    }
    if email is not None:
        doc["email"] = email
    return doc


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def client_repository():
    return InMemoryClientRepository()


@pytest.fixture
def mock_email_service():
    service = MagicMock()
    service.send_template = AsyncMock(return_value=True)
    return service


@pytest.fixture
def mock_collection():
    collection = AsyncMock()
    # Motor's find() returns a cursor synchronously (not a coroutine),
    # so use MagicMock for it. update_one etc. stay as AsyncMock.
    collection.find = MagicMock()
    return collection


@pytest.fixture
def mock_db(mock_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=mock_collection)
    return db


@pytest.fixture
def client_factory():
    return make_client_doc
