"""Keyword-based spam scoring (core domain)."""

from __future__ import annotations

from typing import List

from core.errors import InvalidInput
from core.lexicon import Lexicon
from core.models import Classification, Verdict

# Number of distinct matches that saturates the probability at 1.0.
SATURATION_MATCHES = 5
SPAM_PROBABILITY = 0.5


def match_indicators(text: str, lexicon: Lexicon) -> List[str]:
    """Return the lexicon indicators found in ``text``.

    Matching is a case-insensitive substring test, so an indicator inside a
    longer word still counts. Results follow lexicon order, each at most once.
    """

    lowered = text.lower()
    return [indicator for indicator in lexicon if indicator in lowered]


def classify(text: str, lexicon: Lexicon) -> Classification:
    """Score ``text`` and derive the verdict.

    probability = min(1, matches / 5); spam when probability >= 0.5.
    """

    if text is None or not text.strip():
        raise InvalidInput("Text is required")

    matched = match_indicators(text, lexicon)
    probability = min(1.0, len(matched) / float(SATURATION_MATCHES))
    verdict = Verdict.SPAM if probability >= SPAM_PROBABILITY else Verdict.NOT_SPAM
    return Classification(
        verdict=verdict,
        probability=probability,
        matched_indicators=tuple(matched),
    )
