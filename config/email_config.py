"""
Email service configuration constants.

These are fixed values that don't change per environment.
Environment-specific values (API keys, SMTP host) are loaded from env vars.
"""

# Resend API endpoint
RESEND_API_URL = "https://api.resend.com/emails"

# Seconds before an outbound HTTP/SMTP call is abandoned
EMAIL_SEND_TIMEOUT = 30.0

# Default values (can be overridden by env vars)
EMAIL_DEFAULTS = {
    "mode": "console",
    "from_email": "noreply@gym-management.local",
    "from_name": "Gym Management",
    "team_name": "Gym Management Team",
    "language": "en",
}
