"""History projections (core domain)."""

from __future__ import annotations

from core.models import ClassificationRecord, HistoryEntry

ELLIPSIS = "..."
DEFAULT_PREVIEW_CHARS = 80


def preview_text(text: str, max_chars: int = DEFAULT_PREVIEW_CHARS) -> str:
    """Shorten ``text`` to ``max_chars`` characters, ellipsis included."""

    if len(text) <= max_chars:
        return text
    return text[: max_chars - len(ELLIPSIS)] + ELLIPSIS


def to_history_entry(record: ClassificationRecord, max_chars: int = DEFAULT_PREVIEW_CHARS) -> HistoryEntry:
    """Build the display view for a persisted record."""

    if record.id is None or record.created_at is None:
        raise ValueError("History entries require a persisted record")

    return HistoryEntry(
        id=record.id,
        verdict=record.verdict,
        probability=record.probability,
        matched_indicators=record.matched_indicators,
        text=preview_text(record.text, max_chars),
        created_at=record.created_at,
    )
