"""Email alert notifier adapter.

Composes the alert with the shared formatter and hands it to a mail
transport. Delivery is a single best-effort attempt.
"""

from __future__ import annotations

import logging

from adapters.notification_formatting import format_alert, format_subject
from core.errors import NotificationError
from core.models import ClassificationRecord, NotificationDecision
from core.ports import MailTransportPort

LOGGER = logging.getLogger(__name__)


class EmailAlertNotifier:
    """Notifier adapter that mails spam alerts to the resolved recipient."""

    def __init__(self, transport: MailTransportPort) -> None:
        self._transport = transport

    async def notify(self, decision: NotificationDecision, record: ClassificationRecord) -> bool:
        """Send the alert and report whether the transport accepted it."""

        if not decision.should_send or not decision.recipient:
            return False

        subject = format_subject(record)
        body = format_alert(record)
        try:
            await self._transport.send(decision.recipient, subject, body)
        except NotificationError as exc:
            LOGGER.error("Error sending alert email for %s: %s", record.id, exc)
            return False
        except Exception:
            LOGGER.exception("Unexpected transport failure for %s", record.id)
            return False
        return True
