"""
Client membership persistence.

Thin layer over the `clients` collection used by the renewal sweep.
Updates are single-document `$set`s keyed by client id; there is no
locking, so concurrent writers follow last-write-wins.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorDatabase

from app.models.client import MembershipStatus
from app.services.membership.queries import ClientQuery, STATUS_FIELD, END_DATE_FIELD

logger = logging.getLogger(__name__)

LAST_NOTIFICATION_FIELD = "membership.lastRenewalNotification"

# Only what the sweep needs
CLIENT_PROJECTION = {"name": 1, "email": 1, "membership": 1}


class ClientRepository:
    """Reads and updates client membership fields."""

    COLLECTION_NAME = "clients"

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize ClientRepository.

        Args:
            db: MongoDB database connection
        """
        self._collection = db[self.COLLECTION_NAME]

    async def find(self, query: ClientQuery) -> List[Dict[str, Any]]:
        """Return raw client documents matching the query."""
        cursor = self._collection.find(query.to_mongo(), CLIENT_PROJECTION)
        return await cursor.to_list(length=None)

    async def mark_renewal_notified(self, client_id: Any, notified_at: datetime) -> bool:
        """
        Record when a renewal reminder was sent.

        Returns:
            True if a client document was matched
        """
        result = await self._collection.update_one(
            {"_id": client_id},
            {
                "$set": {
                    LAST_NOTIFICATION_FIELD: notified_at,
                    "updatedAt": notified_at,
                }
            },
        )
        if result.matched_count == 0:
            logger.warning(f"Client {client_id} vanished before notification timestamp was saved")
        return result.matched_count > 0

    async def expire_membership(self, client_id: Any, now: datetime) -> bool:
        """
        Flip an active, past-due membership to expired.

        The filter repeats the selection criteria so a membership renewed
        since it was read is left alone.

        Returns:
            True if the status was changed
        """
        result = await self._collection.update_one(
            {
                "_id": client_id,
                STATUS_FIELD: MembershipStatus.ACTIVE.value,
                END_DATE_FIELD: {"$lt": now},
            },
            {
                "$set": {
                    STATUS_FIELD: MembershipStatus.EXPIRED.value,
                    "updatedAt": now,
                }
            },
        )
        return result.modified_count > 0
