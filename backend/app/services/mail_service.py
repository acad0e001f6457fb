"""
Mail dispatch over SMTP.

Sending is awaited: the blocking smtplib session runs in a worker thread
and any SMTP/network failure surfaces as DispatchError so the enclosing
operation fails instead of reporting success.
"""
import asyncio
import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from app.config import Settings, get_settings
from app.core.exceptions import DispatchError

logger = logging.getLogger(__name__)

VERIFY_EMAIL_SUBJECT = "{full_name}, verify your email address"
RESET_PASSWORD_SUBJECT = "Reset password request"

VERIFY_EMAIL_HTML = """\
<html>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
  <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
    <h2>Hello {full_name},</h2>
    <p>Please verify your email address by following the link below.</p>
    <p><a href="{link}">Verify your email</a></p>
    <p>This verification link will expire in {minutes} minutes.</p>
    <p>If you didn't create an account, you can safely ignore this email.</p>
  </div>
</body>
</html>
"""

RESET_PASSWORD_HTML = """\
<html>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
  <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
    <h3>Hi {full_name}</h3>
    <p>You recently requested to reset the password for your account.</p>
    <p><a href="{link}">Reset your password</a></p>
    <p>If you did not request a password reset, please ignore this mail.
    This link is only valid for the next {minutes} minutes.</p>
  </div>
</body>
</html>
"""


class MailService:
    """An SMTP-backed mail dispatcher."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def build_link(self, path: str, token: str) -> str:
        """``{scheme}://{host}/{path}/{token}`` link to the client app."""
        return f"{self.settings.client_scheme}://{self.settings.client_host}/{path}/{token}"

    def _send_blocking(self, message: EmailMessage) -> None:
        settings = self.settings
        with smtplib.SMTP(
            host=settings.smtp_host,
            port=settings.smtp_port,
            timeout=settings.smtp_timeout_seconds,
        ) as conn:
            if settings.smtp_use_tls:
                conn.starttls()
            if settings.smtp_username:
                conn.login(settings.smtp_username, settings.smtp_password or "")
            conn.send_message(message)

    async def send(self, to: str, subject: str, html: str) -> None:
        """
        Send an HTML email.

        Raises:
            DispatchError: If the SMTP exchange fails
        """
        message = EmailMessage()
        message["From"] = self.settings.mail_from
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML capable mail client.")
        message.add_alternative(html, subtype="html")

        try:
            await asyncio.to_thread(self._send_blocking, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Mail dispatch failed subject=%r: %s", subject, e)
            raise DispatchError(f"Failed to send email: {e}") from e

        logger.info("Mail dispatched subject=%r", subject)

    async def send_verification_email(self, to: str, full_name: str, token: str) -> None:
        html = VERIFY_EMAIL_HTML.format(
            full_name=full_name,
            link=self.build_link("verify-email", token),
            minutes=self.settings.email_verification_expire_minutes,
        )
        await self.send(to, VERIFY_EMAIL_SUBJECT.format(full_name=full_name), html)

    async def send_password_reset_email(self, to: str, full_name: str, token: str) -> None:
        html = RESET_PASSWORD_HTML.format(
            full_name=full_name,
            link=self.build_link("reset-password", token),
            minutes=self.settings.password_reset_expire_minutes,
        )
        await self.send(to, RESET_PASSWORD_SUBJECT, html)
