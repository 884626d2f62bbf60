"""Indicator lexicon (core domain)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple

DEFAULT_INDICATORS: Tuple[str, ...] = (
    "free",
    "win",
    "winner",
    "prize",
    "congratulations",
    "click here",
    "lottery",
    "cash",
    "urgent",
    "offer",
    "limited time",
    "buy now",
)


@dataclass(frozen=True)
class Lexicon:
    """Immutable, ordered set of lowercase indicator phrases."""

    indicators: Tuple[str, ...]

    def __iter__(self) -> Iterator[str]:
        return iter(self.indicators)

    def __len__(self) -> int:
        return len(self.indicators)


def build_lexicon(phrases: Iterable[str] = DEFAULT_INDICATORS) -> Lexicon:
    """Normalize indicator phrases into a Lexicon.

    Phrases are lowercased and stripped; blanks are dropped and duplicates keep
    their first position so matching order stays stable.
    """

    seen: set[str] = set()
    ordered: list[str] = []
    for phrase in phrases:
        normalized = str(phrase).strip().lower()
        if not normalized or normalized in seen:
            continue
        seen.add(normalized)
        ordered.append(normalized)
    return Lexicon(indicators=tuple(ordered))
