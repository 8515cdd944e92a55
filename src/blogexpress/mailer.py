"""
Outbound mail delivery over SMTP
"""

from __future__ import annotations

from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiosmtplib

from .config import Settings, settings
from .logging import get_logger

logger = get_logger(__name__)

RESET_SUBJECT = "Reset Password - BlogExpress"


class MailDeliveryError(Exception):
    """Raised when the SMTP server refuses or drops a message."""

    pass


class Mailer:
    """Sends plain text + HTML messages through a fixed SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str | None = None,
        password: str | None = None,
        sender: str = "BlogExpress",
        start_tls: bool = True,
        reset_url: str = "http://localhost:8080/api/user/reset-password",
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.start_tls = start_tls
        self.reset_url = reset_url.rstrip("/")

    @classmethod
    def from_settings(cls, config: Settings) -> Mailer:
        return cls(
            host=config.smtp_host,
            port=config.smtp_port,
            username=config.send_mail_user,
            password=config.send_mail_pass,
            sender=config.mail_from,
            start_tls=config.smtp_start_tls,
            reset_url=config.reset_password_url,
        )

    def build_message(self, to: str, subject: str, text: str, html: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to
        msg.attach(MIMEText(text, "plain"))
        msg.attach(MIMEText(html, "html"))
        return msg

    async def send(self, to: str, subject: str, text: str, html: str) -> None:
        msg = self.build_message(to, subject, text, html)
        try:
            await aiosmtplib.send(
                msg,
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self.password,
                start_tls=self.start_tls,
            )
        except aiosmtplib.SMTPException as e:
            logger.error("SMTP delivery failed", to=to, subject=subject, error=str(e))
            raise MailDeliveryError(f"SMTP error: {e!s}") from e

        logger.info("Mail sent", to=to, subject=subject)

    def reset_link(self, token: str) -> str:
        return f"{self.reset_url}/{token}"

    async def send_password_reset(self, email: str, token: str) -> None:
        await self.send(
            to=email,
            subject=RESET_SUBJECT,
            text="Blog Express",
            html=f"<h1>Link:</h1> {self.reset_link(token)}",
        )


def get_mailer() -> Mailer:
    """Build a mailer from the current global settings."""
    return Mailer.from_settings(settings)
