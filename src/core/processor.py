"""Core spam check pipeline.

This module is integration-agnostic. It only relies on ports for storage and
notifications, enabling other frontends or adapters without changes here.

The pipeline enforces a strict order:
1) Validate the submitted text
2) Classify against the lexicon
3) Persist the record (failures propagate)
4) Evaluate the notification policy
5) Notify, best-effort (failures are logged and absorbed)
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Set

from core.classifier import classify
from core.config import HistoryConfig, NotificationConfig
from core.errors import InvalidInput
from core.lexicon import Lexicon
from core.models import ClassificationRecord, HistoryEntry, NotificationDecision
from core.policy import decide
from core.ports import HistoryStorePort, NotifierPort

LOGGER = logging.getLogger(__name__)


class SpamCheckProcessor:
    """Orchestrates classification, persistence, and notifications."""

    def __init__(
        self,
        lexicon: Lexicon,
        store: HistoryStorePort,
        notifier: Optional[NotifierPort],
        notification_config: NotificationConfig,
        history_config: HistoryConfig = HistoryConfig(),
        background_notifications: bool = True,
    ) -> None:
        self._lexicon = lexicon
        self._store = store
        self._notifier = notifier
        self._notification = notification_config
        self._history = history_config
        self._background = background_notifications
        self._pending: Set[asyncio.Task] = set()

    async def submit(self, text: Optional[str], notify_email: Optional[str] = None) -> ClassificationRecord:
        """Run one submission through the pipeline and return the stored record."""

        if text is None or not text.strip():
            raise InvalidInput("Text is required")

        classification = classify(text, self._lexicon)

        # Persistence errors propagate: a check that was not recorded did not happen.
        record = self._store.append(ClassificationRecord.from_classification(text, classification))
        LOGGER.info(
            "Classified %s as %s (%.0f%%, %s indicators)",
            record.id,
            record.verdict.value,
            record.probability * 100,
            len(record.matched_indicators),
        )

        decision = decide(
            record.probability,
            notify_email,
            self._notification.default_recipient,
            self._notification.threshold_percent,
        )
        if not decision.should_send or self._notifier is None:
            LOGGER.debug("Notification skipped for %s", record.id)
            return record

        if self._background:
            task = asyncio.create_task(self._notify_safely(decision, record))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        else:
            await self._notify_safely(decision, record)
        return record

    async def _notify_safely(self, decision: NotificationDecision, record: ClassificationRecord) -> None:
        assert self._notifier is not None
        try:
            delivered = await self._notifier.notify(decision, record)
        except Exception:
            # The record is already persisted and returned; alerts never fail a check.
            LOGGER.exception("Notifier crashed for %s", record.id)
            return
        if not delivered:
            LOGGER.warning("Alert for %s was not delivered", record.id)

    async def drain(self) -> None:
        """Wait for in-flight background notifications to finish."""

        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def history(self, limit: Optional[int] = None) -> List[HistoryEntry]:
        """Return the newest records, never more than the configured cap."""

        cap = self._history.limit
        if limit is None or limit > cap:
            limit = cap
        if limit <= 0:
            return []
        return self._store.recent(limit)
