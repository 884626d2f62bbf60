"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class NotificationConfig:
    """Alert gating settings for the notification policy."""

    threshold_percent: float = 40.0
    default_recipient: Optional[str] = None


@dataclass(frozen=True)
class HistoryConfig:
    """Bounds for history retrieval."""

    limit: int = 10
