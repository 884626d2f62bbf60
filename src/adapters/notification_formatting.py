"""Shared alert formatting helpers.

Keeping formatting here prevents drift between notifier adapters and keeps
alerts consistent regardless of delivery channel.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from core.models import ClassificationRecord

DIVIDER = "-" * 48
NO_INDICATORS = "none"


def spam_percent(probability: float) -> int:
    """Return the probability as a whole percent, rounding halves up."""

    return int(Decimal(str(probability * 100)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_subject(record: ClassificationRecord) -> str:
    return f"[Spam Alert] {spam_percent(record.probability)}% spam detected"


def format_alert(record: ClassificationRecord) -> str:
    """Create the plain-text alert body used for mail delivery."""

    keywords = ", ".join(record.matched_indicators) or NO_INDICATORS
    lines = [
        "We detected a spammy message.",
        "",
        f"Spam score: {spam_percent(record.probability)}%",
        f"Keywords: {keywords}",
        "",
        "Message:",
        DIVIDER,
        record.text,
        DIVIDER,
    ]
    return "\n".join(lines)
