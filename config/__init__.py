"""
Configuration module - fixed constants for email delivery and the renewal job.
"""

from config.email_config import EMAIL_DEFAULTS, RESEND_API_URL
from config.renewal_config import RENEWAL_DEFAULTS, RENEWAL_TRIGGER

__all__ = ["EMAIL_DEFAULTS", "RESEND_API_URL", "RENEWAL_DEFAULTS", "RENEWAL_TRIGGER"]
