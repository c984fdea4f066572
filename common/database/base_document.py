"""
Base document class with common fields for all models.

Provides createdAt / updatedAt timestamps, stored under the same camelCase
keys the existing collections already use. Extend this class for
application-specific models.

Example:
    from common.database import BaseDocument

    class Client(BaseDocument):
        email: str
        name: str

        class Settings:
            name = "clients"  # MongoDB collection name
"""

import logging
from datetime import datetime, timezone

from beanie import Document
from pydantic import ConfigDict, Field

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Get current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


class BaseDocument(Document):
    """
    Base document with common fields.

    All documents extending this class will have:
    - created_at: Timestamp when document was created (stored as createdAt)
    - updated_at: Timestamp when document was last modified (stored as updatedAt)
    """

    model_config = ConfigDict(populate_by_name=True)

    created_at: datetime = Field(default_factory=utcnow, alias="createdAt")
    updated_at: datetime = Field(default_factory=utcnow, alias="updatedAt")

    class Settings:
        use_state_management = True

    async def save(self, *args, **kwargs):
        """Override save to automatically update updatedAt."""
        self.updated_at = utcnow()
        collection_name = getattr(self.Settings, "name", self.__class__.__name__)
        logger.debug(f"Saving document to {collection_name}: {self.id}")
        try:
            return await super().save(*args, **kwargs)
        except Exception as e:
            logger.error(f"Failed to save document to {collection_name}: {e}")
            raise
