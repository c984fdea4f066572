"""
Database models for the gym.
"""

from app.models.client import (
    Client,
    ClientRecord,
    EmergencyContact,
    Membership,
    MembershipPlan,
    MembershipStatus,
)

__all__ = [
    "Client",
    "ClientRecord",
    "EmergencyContact",
    "Membership",
    "MembershipPlan",
    "MembershipStatus",
]
