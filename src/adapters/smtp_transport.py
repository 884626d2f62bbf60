"""SMTP mail transport adapter.

Sends plain-text alerts through an SMTP relay with aiosmtplib so delivery
never blocks the event loop serving HTTP requests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formatdate, make_msgid
from typing import Optional

import aiosmtplib

from core.errors import NotificationError

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SMTPConfig:
    """Connection settings for the outbound relay."""

    host: Optional[str]
    port: int = 587
    username: Optional[str] = None
    password: Optional[str] = None
    sender: Optional[str] = None
    start_tls: Optional[bool] = None
    use_tls: bool = False
    timeout: float = 30.0

    @property
    def enabled(self) -> bool:
        return bool(self.host)


class SMTPMailTransport:
    """Mail transport that satisfies the MailTransportPort contract."""

    def __init__(self, config: SMTPConfig) -> None:
        self._config = config

    def _build_message(self, recipient: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self._config.sender or self._config.username or ""
        message["To"] = recipient
        message["Subject"] = subject
        message["Date"] = formatdate(localtime=True)
        message["Message-ID"] = make_msgid()
        message.set_content(body)
        return message

    async def send(self, recipient: str, subject: str, body: str) -> None:
        """Deliver one message, wrapping any SMTP failure in NotificationError."""

        if not self._config.enabled:
            raise NotificationError("SMTP host is not configured")

        message = self._build_message(recipient, subject, body)
        try:
            await aiosmtplib.send(
                message,
                hostname=self._config.host,
                port=self._config.port,
                username=self._config.username or None,
                password=self._config.password or None,
                start_tls=self._config.start_tls,
                use_tls=self._config.use_tls,
                timeout=self._config.timeout,
            )
        except (aiosmtplib.SMTPException, OSError) as exc:
            raise NotificationError(f"SMTP delivery to {recipient} failed: {exc}") from exc
        LOGGER.info("Alert email sent to %s", recipient)

    async def verify(self) -> bool:
        """Check that the relay accepts a connection and login.

        Only used for a startup log line; failures are reported, not raised.
        """

        if not self._config.enabled:
            LOGGER.warning("SMTP disabled, alerts will not be delivered")
            return False

        client = aiosmtplib.SMTP(
            hostname=self._config.host,
            port=self._config.port,
            start_tls=self._config.start_tls,
            use_tls=self._config.use_tls,
            timeout=self._config.timeout,
        )
        try:
            await client.connect()
            if self._config.username:
                await client.login(self._config.username, self._config.password or "")
            await client.quit()
        except (aiosmtplib.SMTPException, OSError) as exc:
            LOGGER.error("SMTP error: %s", exc)
            return False
        finally:
            client.close()
        LOGGER.info("SMTP server is ready to send emails")
        return True
