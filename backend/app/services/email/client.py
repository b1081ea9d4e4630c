import logging
from collections import deque
from dataclasses import dataclass
from email.message import EmailMessage as MIMEMessage
from email.utils import formataddr, make_msgid
from typing import Protocol

import aiosmtplib

from app.services.email.templates import html_to_text
from app.settings import Settings


@dataclass
class EmailMessage:
    to: str
    subject: str
    html: str
    text: str | None = None


class EmailClient(Protocol):
    async def send(self, message: EmailMessage) -> None: ...


class SMTPEmailClient:
    """Sends mail through an SMTP relay with aiosmtplib (implicit TLS or STARTTLS)."""

    def __init__(self, settings: Settings, logger: logging.Logger) -> None:
        self.logger = logger
        self._host = settings.SMTP_HOST
        self._port = settings.SMTP_PORT
        self._username = settings.SMTP_USERNAME
        self._password = settings.SMTP_PASSWORD
        self._use_tls = settings.SMTP_USE_TLS
        self._start_tls = settings.SMTP_START_TLS
        self._timeout = settings.NOTIF_SIDE_CHANNEL_TIMEOUT_SECONDS
        self._sender = formataddr((settings.EMAIL_FROM_NAME, settings.EMAIL_FROM))

    def _build_mime_message(self, message: EmailMessage) -> MIMEMessage:
        mime = MIMEMessage()
        mime["From"] = self._sender
        mime["To"] = message.to
        mime["Subject"] = message.subject
        mime["Message-ID"] = make_msgid()
        mime.set_content(message.text or html_to_text(message.html))
        mime.add_alternative(message.html, subtype="html")
        return mime

    async def send(self, message: EmailMessage) -> None:
        mime = self._build_mime_message(message)
        smtp = aiosmtplib.SMTP(
            hostname=self._host,
            port=self._port,
            use_tls=self._use_tls,
            start_tls=self._start_tls,
            timeout=self._timeout,
        )
        async with smtp:
            if self._username and self._password:
                await smtp.login(self._username, self._password)
            _errors, response = await smtp.send_message(mime)

        self.logger.info(
            "Email handed to SMTP relay",
            extra={"message_id": mime["Message-ID"], "smtp_response": response},
        )


class ConsoleEmailClient:
    """Logs outgoing mail instead of sending it; keeps the most recent messages for inspection."""

    def __init__(self, logger: logging.Logger, keep_last: int = 100) -> None:
        self.logger = logger
        self.sent: deque[EmailMessage] = deque(maxlen=keep_last)

    async def send(self, message: EmailMessage) -> None:
        self.sent.append(message)
        self.logger.info(
            f"Email (console): {message.subject}",
            extra={"to": message.to, "subject": message.subject, "body": message.text or html_to_text(message.html)},
        )


def create_email_client(settings: Settings, logger: logging.Logger) -> EmailClient:
    if settings.EMAIL_PROVIDER == "console":
        return ConsoleEmailClient(logger)
    return SMTPEmailClient(settings, logger)
