"""Transactional email over SMTP."""

import asyncio
import logging
import re
import smtplib
import ssl
from concurrent.futures import ThreadPoolExecutor
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formatdate, make_msgid
from functools import partial
from html import escape as html_escape

from media_portal.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Thread pool for non-blocking SMTP operations
_smtp_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="smtp")


def _layout(title: str, body: str) -> str:
    return (
        "<!DOCTYPE html><html><body style=\"font-family: Arial, sans-serif; "
        "line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto;\">"
        f"<h2>{html_escape(title)}</h2>{body}"
        "<p style=\"color: #666; margin-top: 30px;\">Media Team</p>"
        "</body></html>"
    )


class EmailService:
    """Sends portal emails.

    Every send returns a bool and never raises, so callers can schedule
    them as background tasks after the response is committed.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def _get_smtp_connection(self) -> smtplib.SMTP | smtplib.SMTP_SSL:
        settings = self.settings
        context = ssl.create_default_context()

        if settings.smtp_use_tls:
            smtp = smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=30)
            smtp.ehlo()
            smtp.starttls(context=context)
            # EHLO again after STARTTLS as required by RFC 3207
            smtp.ehlo()
        else:
            smtp = smtplib.SMTP_SSL(
                settings.smtp_host, settings.smtp_port, timeout=30, context=context
            )
            smtp.ehlo()

        if settings.smtp_username and settings.smtp_password:
            smtp.login(settings.smtp_username, settings.smtp_password)
        return smtp

    def _create_message(self, to_email: str, subject: str, html_body: str) -> MIMEMultipart:
        settings = self.settings
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{settings.email_from_name} <{settings.email_from_address}>"
        msg["To"] = to_email
        msg["Message-ID"] = make_msgid(domain=settings.email_from_address.split("@")[1])
        msg["Date"] = formatdate(localtime=True)

        plain = re.sub(r"<[^>]+>", " ", html_body)
        plain = re.sub(r"\s+", " ", plain).strip()
        msg.attach(MIMEText(plain, "plain", "utf-8"))
        msg.attach(MIMEText(html_body, "html", "utf-8"))
        return msg

    def _send_email_sync(self, to_email: str, msg: MIMEMultipart) -> None:
        """Synchronous send (runs in thread pool)."""
        smtp = self._get_smtp_connection()
        try:
            smtp.sendmail(self.settings.email_from_address, to_email, msg.as_string())
        finally:
            try:
                smtp.quit()
            except smtplib.SMTPException:
                pass

    async def send_email(self, to_email: str, subject: str, html_body: str) -> bool:
        """Send an email via SMTP without blocking the event loop.

        Returns:
            True if sent successfully, False otherwise
        """
        if not self.settings.smtp_configured:
            logger.warning("SMTP not configured, skipping email '%s'", subject)
            return False

        try:
            msg = self._create_message(to_email, subject, html_body)
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(
                _smtp_executor, partial(self._send_email_sync, to_email, msg)
            )
            logger.info("Email '%s' sent", subject)
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Error sending email '%s': %s", subject, e)
            return False

    async def send_confirmation_email(self, to_email: str, full_name: str) -> bool:
        """Acknowledge a new application to the applicant."""
        body = (
            f"<p>Dear {html_escape(full_name)},</p>"
            "<p>Thank you for registering to join the media team. We have received "
            "your application and will review it shortly.</p>"
            "<ul><li>Our team will review your application</li>"
            "<li>You will be contacted within 3-5 business days</li>"
            "<li>If approved, you will receive your portal login details</li></ul>"
        )
        return await self.send_email(
            to_email, "Thank You for Registering", _layout("Registration received", body)
        )

    async def send_admin_notification(
        self, full_name: str, email: str, skills: list[str]
    ) -> bool:
        """Tell the configured admin address about a new application."""
        recipient = self.settings.admin_notification_email
        if not recipient:
            return False
        body = (
            f"<p><strong>Name:</strong> {html_escape(full_name)}</p>"
            f"<p><strong>Email:</strong> {html_escape(email)}</p>"
            f"<p><strong>Skills:</strong> {html_escape(', '.join(skills))}</p>"
            f"<p><a href=\"{self.settings.frontend_url}/admin/applications\">Review applications</a></p>"
        )
        return await self.send_email(
            recipient, f"New Registration: {full_name}", _layout("New registration", body)
        )

    async def send_approval_email(
        self, to_email: str, full_name: str, username: str, temporary_password: str
    ) -> bool:
        """Send login credentials to an approved applicant."""
        body = (
            f"<p>Dear {html_escape(full_name)},</p>"
            "<p>Your application has been approved. You can now log in to the team portal.</p>"
            f"<p><strong>Email:</strong> {html_escape(to_email)}<br>"
            f"<strong>Username:</strong> {html_escape(username)}<br>"
            f"<strong>Temporary password:</strong> {html_escape(temporary_password)}</p>"
            "<p>Please change your password after your first login.</p>"
            f"<p><a href=\"{self.settings.frontend_url}/login\">Log in</a></p>"
        )
        return await self.send_email(
            to_email, "Welcome to the Media Team!", _layout("Application approved", body)
        )

    async def send_rejection_email(
        self, to_email: str, full_name: str, reason: str | None = None
    ) -> bool:
        body = (
            f"<p>Dear {html_escape(full_name)},</p>"
            "<p>Thank you for your interest. Unfortunately your application was not approved.</p>"
        )
        if reason:
            body += f"<p><strong>Reason:</strong> {html_escape(reason)}</p>"
        return await self.send_email(
            to_email, "Application Update", _layout("Application update", body)
        )

    async def send_role_assigned_email(
        self, to_email: str, full_name: str, role_name: str, responsibilities: list[str]
    ) -> bool:
        items = "".join(f"<li>{html_escape(r)}</li>" for r in responsibilities)
        body = (
            f"<p>Dear {html_escape(full_name)},</p>"
            f"<p>You have been assigned the role of <strong>{html_escape(role_name)}</strong>.</p>"
        )
        if items:
            body += f"<p>Your responsibilities:</p><ul>{items}</ul>"
        return await self.send_email(
            to_email, f"New Role Assigned: {role_name}", _layout("New role assigned", body)
        )

    async def send_password_reset_email(self, to_email: str, full_name: str, token: str) -> bool:
        link = f"{self.settings.frontend_url}/reset-password?token={token}"
        body = (
            f"<p>Dear {html_escape(full_name)},</p>"
            "<p>We received a request to reset your password. The link below is valid "
            f"for {self.settings.password_reset_token_minutes} minutes.</p>"
            f"<p><a href=\"{link}\">Reset password</a></p>"
            "<p>If you did not request this, you can ignore this email.</p>"
        )
        return await self.send_email(to_email, "Password Reset", _layout("Password reset", body))


def get_email_service() -> EmailService:
    return EmailService()
