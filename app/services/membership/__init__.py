"""
Membership renewal: query builders, persistence, reminder policy and the daily sweep.
"""

from app.services.membership.client_repository import ClientRepository
from app.services.membership.renewal_policy import RenewalPolicy
from app.services.membership.renewal_service import MembershipRenewalService

__all__ = ["ClientRepository", "RenewalPolicy", "MembershipRenewalService"]
