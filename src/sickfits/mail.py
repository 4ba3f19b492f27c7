"""Outbound mail over SMTP."""

from __future__ import annotations

from email.message import EmailMessage
from html import escape

import aiosmtplib

from .config import settings
from .logging import get_logger

logger = get_logger(__name__)


def make_a_nice_email(text: str) -> str:
    """Wrap a snippet of HTML in the store's email template."""
    return f"""
    <div class="email" style="
      border: 1px solid black;
      padding: 20px;
      font-family: sans-serif;
      line-height: 2;
      font-size: 20px;
    ">
      <h2>Hello There!</h2>
      <p>{text}</p>
      <p>😘, {escape(settings.mail_signature)}</p>
    </div>
    """


class MailSender:
    """Sends HTML mail through the configured SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: str | None = None,
        password: str | None = None,
        start_tls: bool = False,
    ):
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.start_tls = start_tls

    def build_message(self, to: str, subject: str, html: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML capable mail client.")
        message.add_alternative(html, subtype="html")
        return message

    async def send(self, to: str, subject: str, html: str) -> None:
        """Deliver one message. SMTP failures propagate to the caller."""
        message = self.build_message(to, subject, html)
        await aiosmtplib.send(
            message,
            hostname=self.host,
            port=self.port,
            username=self.username,
            password=self.password,
            start_tls=self.start_tls,
        )
        logger.info("Mail sent", subject=subject)


def get_mail_sender() -> MailSender:
    """Create a MailSender from settings."""
    if not settings.mail_from:
        raise ValueError("Mail sender address is required. Set SICKFITS_MAIL_FROM.")

    return MailSender(
        host=settings.mail_host,
        port=settings.mail_port,
        sender=settings.mail_from,
        username=settings.mail_username,
        password=settings.mail_password,
        start_tls=settings.mail_start_tls,
    )
