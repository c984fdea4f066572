"""
Gym management application settings.

Extends the base settings with email transport configuration.
"""

from typing import Optional

from common.config import BaseAppSettings
from config.email_config import EMAIL_DEFAULTS


class Settings(BaseAppSettings):
    """Gym-management-specific settings."""

    # ==========================================================================
    # Email Settings (renewal reminders, welcome mails, password resets)
    # ==========================================================================
    EMAIL_MODE: str = EMAIL_DEFAULTS["mode"]  # console, smtp or resend
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_FROM_EMAIL: str = EMAIL_DEFAULTS["from_email"]
    SMTP_FROM_NAME: str = EMAIL_DEFAULTS["from_name"]
    RESEND_API_KEY: Optional[str] = None
    EMAIL_TEAM_NAME: str = EMAIL_DEFAULTS["team_name"]

    # ==========================================================================
    # Frontend URL (for email links)
    # ==========================================================================
    APP_URL: str = "http://localhost:3000"

    def validate_required(self) -> None:
        """Extend base validation with email transport requirements."""
        super().validate_required()

        if self.EMAIL_MODE == "smtp" and not self.SMTP_HOST:
            raise ValueError("Configuration errors:\n- SMTP_HOST is required when EMAIL_MODE=smtp")
        if self.EMAIL_MODE == "resend" and not self.RESEND_API_KEY:
            raise ValueError("Configuration errors:\n- RESEND_API_KEY is required when EMAIL_MODE=resend")


# Global settings instance
settings = Settings()
