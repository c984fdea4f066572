"""
Client model for the gym.

Matches the existing `clients` collection: camelCase keys, with the
membership stored as an embedded subdocument.
"""

import math
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Optional

from beanie import Indexed
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from common.database import BaseDocument


class MembershipStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    PENDING = "pending"


class MembershipPlan(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    HALF_YEARLY = "half_yearly"
    YEARLY = "yearly"
    CUSTOM = "custom"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (as stored by older writers) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Membership(BaseModel):
    """Embedded membership record."""

    model_config = ConfigDict(populate_by_name=True)

    plan: MembershipPlan = MembershipPlan.MONTHLY
    start_date: datetime = Field(default_factory=_utcnow, alias="startDate")
    end_date: datetime = Field(..., alias="endDate")
    status: MembershipStatus = MembershipStatus.ACTIVE
    amount: float = Field(0, ge=0)
    last_renewal_notification: Optional[datetime] = Field(None, alias="lastRenewalNotification")

    @field_validator("start_date", "end_date", "last_renewal_notification")
    @classmethod
    def _normalize_timezone(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return None
        return as_utc(value)

    @model_validator(mode="after")
    def _check_dates(self) -> "Membership":
        if self.end_date < self.start_date:
            raise ValueError("membership endDate must be on or after startDate")
        return self

    def days_until_expiry(self, now: datetime) -> int:
        """Whole days until endDate, rounded up (negative once expired)."""
        return math.ceil((self.end_date - now) / timedelta(days=1))


class EmergencyContact(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    relationship: Optional[str] = None


class Client(BaseDocument):
    """
    Client document.

    Created at signup, updated on payment or admin action. The renewal
    job reads the identity fields and mutates only membership fields.
    """

    name: str = Field(..., min_length=1)
    email: Indexed(EmailStr, unique=True)  # type: ignore
    phone: str
    address: Optional[str] = None
    date_of_birth: Optional[datetime] = Field(None, alias="dateOfBirth")
    emergency_contact: EmergencyContact = Field(
        default_factory=EmergencyContact, alias="emergencyContact"
    )
    membership: Membership
    notes: Optional[str] = None
    qr_code: Optional[str] = Field(None, alias="qrCode")

    class Settings:
        name = "clients"
        use_state_management = True


class ClientRecord(BaseModel):
    """
    The slice of a client document the renewal sweep works with.

    Validating raw documents through this model is how malformed
    membership data is detected.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Any = Field(..., alias="_id")
    name: Optional[str] = None
    email: Optional[str] = None
    membership: Membership
