"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for storage, notification and mail
adapters so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import List, Protocol

from core.models import ClassificationRecord, HistoryEntry, NotificationDecision


class HistoryStorePort(Protocol):
    """Append-only record storage required by the core pipeline."""

    def append(self, record: ClassificationRecord) -> ClassificationRecord:
        ...

    def recent(self, limit: int) -> List[HistoryEntry]:
        ...


class MailTransportPort(Protocol):
    """Outbound mail delivery consumed by notifier adapters."""

    async def send(self, recipient: str, subject: str, body: str) -> None:
        ...


class NotifierPort(Protocol):
    """Notification operations required by the core pipeline."""

    async def notify(self, decision: NotificationDecision, record: ClassificationRecord) -> bool:
        ...
