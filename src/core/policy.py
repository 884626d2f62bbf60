"""Alert gating rules (core domain)."""

from __future__ import annotations

from typing import Optional

from core.models import NotificationDecision

DEFAULT_THRESHOLD_PERCENT = 40.0


def _clean(recipient: Optional[str]) -> Optional[str]:
    if recipient is None:
        return None
    recipient = recipient.strip()
    return recipient or None


def decide(
    probability: float,
    caller_recipient: Optional[str],
    default_recipient: Optional[str],
    threshold_percent: float = DEFAULT_THRESHOLD_PERCENT,
) -> NotificationDecision:
    """Decide whether an alert goes out and who receives it.

    A caller-provided recipient wins over the configured default. Without
    either, nothing is sent regardless of the probability.
    """

    recipient = _clean(caller_recipient) or _clean(default_recipient)
    if recipient is None:
        return NotificationDecision(should_send=False)

    # Rounded so float noise in probability * 100 cannot flip the comparison.
    if round(probability * 100, 6) < threshold_percent:
        return NotificationDecision(should_send=False, recipient=recipient)

    return NotificationDecision(should_send=True, recipient=recipient)
