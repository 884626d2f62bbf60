"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class Verdict(str, Enum):
    """Binary classification outcome."""

    SPAM = "spam"
    NOT_SPAM = "not_spam"


@dataclass(frozen=True)
class Classification:
    """Result of scoring one text against the lexicon."""

    verdict: Verdict
    probability: float
    matched_indicators: Tuple[str, ...]


@dataclass(frozen=True)
class ClassificationRecord:
    """Persisted representation of a single classification.

    ``id`` and ``created_at`` stay ``None`` until the history store assigns
    them on append.
    """

    text: str
    verdict: Verdict
    probability: float
    matched_indicators: Tuple[str, ...]
    id: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_classification(cls, text: str, classification: Classification) -> "ClassificationRecord":
        return cls(
            text=text,
            verdict=classification.verdict,
            probability=classification.probability,
            matched_indicators=classification.matched_indicators,
        )


@dataclass(frozen=True)
class HistoryEntry:
    """Read-only display view of a record with a shortened text."""

    id: str
    verdict: Verdict
    probability: float
    matched_indicators: Tuple[str, ...]
    text: str
    created_at: datetime


@dataclass(frozen=True)
class NotificationDecision:
    """Whether to send an alert and to whom. Never persisted."""

    should_send: bool
    recipient: Optional[str] = None
