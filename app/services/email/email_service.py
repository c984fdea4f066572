"""
Email service for sending transactional emails.

Supports SMTP, Resend API, and console logging modes.
Strings come from JSON locale files with {{placeholder}} substitution.
"""

import json
import os
import logging
from datetime import datetime
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
import aiosmtplib

from config.email_config import (
    RESEND_API_URL,
    EMAIL_SEND_TIMEOUT,
    EMAIL_DEFAULTS,
)

logger = logging.getLogger(__name__)

# Load locale files
LOCALES_DIR = Path(__file__).parent / "locales"
_translations_cache: dict = {}


class EmailTemplate(str, Enum):
    MEMBERSHIP_RENEWAL = "membership_renewal"
    WELCOME = "welcome"
    PASSWORD_RESET = "password_reset"


def format_long_date(value: Any) -> str:
    """Render a date like 'Monday, January 5, 2026'."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return f"{value:%A}, {value:%B} {value.day}, {value.year}"


def format_plan(plan: Any) -> str:
    """Render a plan identifier for humans (half_yearly -> half yearly)."""
    plan = getattr(plan, "value", plan)
    return str(plan).replace("_", " ")


class EmailService:
    """
    Email service with multi-mode support.

    Modes:
        - console: Log emails to console (development)
        - smtp: Send via SMTP
        - resend: Send via Resend HTTP API
    """

    def __init__(
        self,
        mode: Optional[str] = None,
        resend_api_key: Optional[str] = None,
        from_email: Optional[str] = None,
        from_name: Optional[str] = None,
        team_name: Optional[str] = None,
        app_url: Optional[str] = None,
        smtp_host: Optional[str] = None,
        smtp_port: Optional[int] = None,
        smtp_user: Optional[str] = None,
        smtp_password: Optional[str] = None,
    ):
        """
        Initialize email service.

        Args:
            mode: "console", "smtp", or "resend" (default from EMAIL_MODE env var)
            resend_api_key: Resend API key (default from RESEND_API_KEY env var)
            from_email: Sender email address
            from_name: Sender display name
            team_name: Team name for email signatures
            app_url: Base URL for frontend links in emails
            smtp_host: SMTP server host
            smtp_port: SMTP server port
            smtp_user: SMTP username
            smtp_password: SMTP password
        """
        self._mode = mode or os.environ.get("EMAIL_MODE", EMAIL_DEFAULTS["mode"])
        self._from_email = from_email or os.environ.get("SMTP_FROM_EMAIL", EMAIL_DEFAULTS["from_email"])
        self._from_name = from_name or os.environ.get("SMTP_FROM_NAME", EMAIL_DEFAULTS["from_name"])
        self._team_name = team_name or os.environ.get("EMAIL_TEAM_NAME", EMAIL_DEFAULTS["team_name"])
        self._app_url = app_url or os.environ.get("APP_URL", "http://localhost:3000")
        self._resend_api_key = resend_api_key or os.environ.get("RESEND_API_KEY")

        self._smtp_host = smtp_host or os.environ.get("SMTP_HOST")
        self._smtp_port = smtp_port or int(os.environ.get("SMTP_PORT", "587"))
        self._smtp_user = smtp_user or os.environ.get("SMTP_USER")
        self._smtp_password = smtp_password or os.environ.get("SMTP_PASSWORD")

        if self._mode == "resend" and not self._resend_api_key:
            logger.warning("Resend API key not configured, falling back to console mode")
            self._mode = "console"
        elif self._mode == "smtp" and not self._smtp_host:
            logger.warning("SMTP host not configured, falling back to console mode")
            self._mode = "console"

        logger.info(f"Email service initialized in {self._mode} mode")

    @property
    def mode(self) -> str:
        return self._mode

    def _get_translations(
        self,
        lang: str,
        email_type: str,
        variables: dict
    ) -> dict:
        """
        Load translations from JSON file and replace placeholders.

        Args:
            lang: Language code
            email_type: Email type key (e.g., "membership_renewal")
            variables: Dict of placeholder values to substitute

        Returns:
            dict with all translated strings for the email type
        """
        if not (LOCALES_DIR / f"{lang}.json").exists():
            logger.warning(f"Locale '{lang}' not available, falling back to English")
            lang = EMAIL_DEFAULTS["language"]

        if lang not in _translations_cache:
            with open(LOCALES_DIR / f"{lang}.json", "r", encoding="utf-8") as f:
                _translations_cache[lang] = json.load(f)

        translations = _translations_cache[lang].get(email_type, {})

        result = {}
        for key, value in translations.items():
            for var_name, var_value in variables.items():
                value = value.replace(f"{{{{{var_name}}}}}", str(var_value))
            result[key] = value

        return result

    async def send_template(
        self,
        to_email: str,
        template: EmailTemplate,
        data: Dict[str, Any],
    ) -> bool:
        """
        Send one of the known templates.

        Args:
            to_email: Recipient email address
            template: Template identifier
            data: Template data (keys depend on the template)

        Returns:
            True if the provider accepted the email
        """
        try:
            template = EmailTemplate(template)
            if template == EmailTemplate.MEMBERSHIP_RENEWAL:
                result = await self.send_membership_renewal_email(
                    to_email,
                    client_name=data.get("clientName"),
                    end_date=data["endDate"],
                    plan_type=data["planType"],
                )
            elif template == EmailTemplate.WELCOME:
                result = await self.send_welcome_email(
                    to_email,
                    client_name=data.get("clientName"),
                    plan_type=data["planType"],
                )
            else:
                result = await self.send_password_reset_email(
                    to_email,
                    reset_token=data["resetToken"],
                    user_name=data.get("userName"),
                )
        except (ValueError, KeyError) as e:
            logger.error(f"Cannot render email template {template!r} for {to_email}: {e}")
            return False

        return bool(result.get("success"))

    async def send_membership_renewal_email(
        self,
        to_email: str,
        end_date: Any,
        plan_type: Any,
        client_name: Optional[str] = None,
        language: str = "en",
    ) -> dict:
        """
        Send membership renewal reminder.

        Args:
            to_email: Recipient email address
            end_date: Membership end date (datetime or ISO string)
            plan_type: Membership plan identifier
            client_name: Client's display name (optional)
            language: Language code

        Returns:
            dict with success status and message
        """
        name = client_name or "there"
        t = self._get_translations(language, EmailTemplate.MEMBERSHIP_RENEWAL.value, {
            "name": name,
            "plan": format_plan(plan_type),
            "end_date": format_long_date(end_date),
        })

        html_content = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2>{t["header"]}</h2>
  <p>{t["greeting"]}</p>
  <p>{t["body"]}</p>
  <p>{t["call_to_action"]}</p>
  <div style="margin-top: 20px; padding: 15px; background-color: #f7f7f7; border-radius: 5px;">
    <p style="margin: 0;">{t["sign_off"]}<br>{self._team_name}</p>
  </div>
</div>
"""

        text_content = f"""{t["greeting"]}

{t["body"]} {t["call_to_action"]}

{t["sign_off"]}
{self._team_name}
"""

        return await self._send(
            to=to_email,
            subject=t["subject"],
            html=html_content,
            text=text_content,
        )

    async def send_welcome_email(
        self,
        to_email: str,
        plan_type: Any,
        client_name: Optional[str] = None,
        language: str = "en",
    ) -> dict:
        """Send welcome email after a membership is activated."""
        name = client_name or "there"
        t = self._get_translations(language, EmailTemplate.WELCOME.value, {
            "name": name,
            "plan": format_plan(plan_type),
        })

        html_content = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2>{t["header"]}</h2>
  <p>{t["greeting"]}</p>
  <p>{t["body"]}</p>
  <p>{t["community"]}</p>
  <p>{t["questions"]}</p>
  <div style="margin-top: 20px; padding: 15px; background-color: #f7f7f7; border-radius: 5px;">
    <p style="margin: 0;">{t["sign_off"]}<br>{self._team_name}</p>
  </div>
</div>
"""

        text_content = f"""{t["greeting"]}

{t["body"]} {t["community"]}

{t["questions"]}

{t["sign_off"]}
{self._team_name}
"""

        return await self._send(
            to=to_email,
            subject=t["subject"],
            html=html_content,
            text=text_content,
        )

    async def send_password_reset_email(
        self,
        to_email: str,
        reset_token: str,
        user_name: Optional[str] = None,
        language: str = "en",
    ) -> dict:
        """
        Send password reset email.

        Args:
            to_email: Recipient email address
            reset_token: Password reset token
            user_name: User's display name (optional)
            language: Language code

        Returns:
            dict with success status and message
        """
        name = user_name or "there"
        reset_url = f"{self._app_url}/reset-password?token={reset_token}"
        t = self._get_translations(language, EmailTemplate.PASSWORD_RESET.value, {"name": name})

        html_content = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2>{t["header"]}</h2>
  <p>{t["greeting"]}</p>
  <p>{t["body"]}</p>
  <div style="text-align: center; margin: 25px 0;">
    <a href="{reset_url}" style="background-color: #4CAF50; color: white; padding: 10px 20px; text-decoration: none; border-radius: 5px; font-weight: bold;">{t["button"]}</a>
  </div>
  <p>{t["link_fallback"]}</p>
  <p>{reset_url}</p>
  <p>{t["ignore_notice"]}</p>
  <div style="margin-top: 20px; padding: 15px; background-color: #f7f7f7; border-radius: 5px;">
    <p style="margin: 0;">{t["sign_off"]}<br>{self._team_name}</p>
  </div>
</div>
"""

        text_content = f"""{t["greeting"]}

{t["body"]}

{reset_url}

{t["ignore_notice"]}

{t["sign_off"]}
{self._team_name}
"""

        return await self._send(
            to=to_email,
            subject=t["subject"],
            html=html_content,
            text=text_content,
        )

    async def _send(
        self,
        to: str,
        subject: str,
        html: str,
        text: str,
    ) -> dict:
        """
        Send email via configured provider.

        Returns:
            dict with success status and details
        """
        if self._mode == "console":
            return self._send_console(to, subject, html, text)
        elif self._mode == "smtp":
            return await self._send_smtp(to, subject, html, text)
        elif self._mode == "resend":
            return await self._send_resend(to, subject, html, text)
        else:
            logger.error(f"Unknown email mode: {self._mode}")
            return {"success": False, "error": f"Unknown email mode: {self._mode}"}

    def _send_console(
        self,
        to: str,
        subject: str,
        html: str,
        text: str,
    ) -> dict:
        """Log email to console (development mode)."""
        logger.info("=" * 60)
        logger.info("EMAIL (console mode)")
        logger.info(f"To: {to}")
        logger.info(f"Subject: {subject}")
        logger.info("-" * 60)
        logger.info(text)
        logger.info("=" * 60)

        return {
            "success": True,
            "mode": "console",
            "message": "Email logged to console",
        }

    async def _send_smtp(
        self,
        to: str,
        subject: str,
        html: str,
        text: str,
    ) -> dict:
        """Send email via SMTP."""
        try:
            message = MIMEMultipart("alternative")
            message["Subject"] = subject
            message["From"] = f"{self._from_name} <{self._from_email}>"
            message["To"] = to
            message.attach(MIMEText(text, "plain"))
            message.attach(MIMEText(html, "html"))

            # Port 465 is implicit TLS, anything else upgrades with STARTTLS
            use_tls = self._smtp_port == 465

            await aiosmtplib.send(
                message,
                hostname=self._smtp_host,
                port=self._smtp_port,
                username=self._smtp_user,
                password=self._smtp_password,
                use_tls=use_tls,
                start_tls=not use_tls,
                timeout=EMAIL_SEND_TIMEOUT,
            )

            logger.info(f"Email sent via SMTP to {to}")
            return {
                "success": True,
                "mode": "smtp",
                "message": "Email sent via SMTP",
            }

        except aiosmtplib.SMTPException as e:
            logger.error(f"Failed to send email via SMTP: {e}")
            return {
                "success": False,
                "error": str(e),
            }

    async def _send_resend(
        self,
        to: str,
        subject: str,
        html: str,
        text: str,
    ) -> dict:
        """Send email via Resend API."""
        async with httpx.AsyncClient(timeout=EMAIL_SEND_TIMEOUT) as client:
            try:
                response = await client.post(
                    RESEND_API_URL,
                    headers={
                        "Authorization": f"Bearer {self._resend_api_key}",
                        "Content-Type": "application/json",
                    },
                    json={
                        "from": f"{self._from_name} <{self._from_email}>",
                        "to": [to],
                        "subject": subject,
                        "html": html,
                        "text": text,
                    },
                )
            except httpx.HTTPError as e:
                logger.error(f"Failed to send email via Resend: {e}")
                return {
                    "success": False,
                    "error": str(e),
                }

        if response.status_code == 200:
            data = response.json()
            return {
                "success": True,
                "mode": "resend",
                "messageId": data.get("id"),
            }

        try:
            error_msg = response.json().get("message", "Unknown error")
        except ValueError:
            error_msg = f"HTTP {response.status_code}"
        logger.error(f"Resend API error: {error_msg}")
        return {
            "success": False,
            "error": error_msg,
        }
