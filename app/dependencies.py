"""
Service construction and FastAPI dependencies.

Services are built explicitly from a database handle and settings and
kept on `app.state`; nothing here holds module-level connection state.
"""

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.config import Settings
from app.scheduler import MembershipRenewalScheduler
from app.services.email.email_service import EmailService
from app.services.membership.client_repository import ClientRepository
from app.services.membership.renewal_service import MembershipRenewalService


# ─────────────────────────────────────────────────────────────────
# Builders
# ─────────────────────────────────────────────────────────────────

def build_email_service(settings: Settings) -> EmailService:
    """Create the email service from transport settings."""
    return EmailService(
        mode=settings.EMAIL_MODE,
        resend_api_key=settings.RESEND_API_KEY,
        from_email=settings.SMTP_FROM_EMAIL,
        from_name=settings.SMTP_FROM_NAME,
        team_name=settings.EMAIL_TEAM_NAME,
        app_url=settings.APP_URL,
        smtp_host=settings.SMTP_HOST,
        smtp_port=settings.SMTP_PORT,
        smtp_user=settings.SMTP_USER,
        smtp_password=settings.SMTP_PASSWORD,
    )


def build_renewal_service(
    db: AsyncIOMotorDatabase,
    email_service: EmailService,
) -> MembershipRenewalService:
    """Wire the renewal sweep to the clients collection and email service."""
    return MembershipRenewalService(
        repository=ClientRepository(db),
        email_service=email_service,
    )


# ─────────────────────────────────────────────────────────────────
# Request-scoped accessors
# ─────────────────────────────────────────────────────────────────

def get_renewal_scheduler(request: Request) -> MembershipRenewalScheduler:
    return request.app.state.renewal_scheduler

