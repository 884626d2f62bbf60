"""Wire schemas for the HTTP adapter.

Field names follow the public JSON contract (camelCase) rather than the
core's snake_case attributes.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from core.models import ClassificationRecord, HistoryEntry


class SpamCheckRequest(BaseModel):
    # Missing text is rejected by the pipeline with a 400.
    text: Optional[str] = Field(None, description="Message to classify")
    notifyEmail: Optional[str] = Field(None, description="Alert recipient, overrides the default")


class SpamCheckResponse(BaseModel):
    id: str
    result: str
    spamProbability: float
    matchedKeywords: List[str]
    createdAt: datetime

    @classmethod
    def from_record(cls, record: ClassificationRecord) -> "SpamCheckResponse":
        return cls(
            id=record.id,
            result=record.verdict.value,
            spamProbability=record.probability,
            matchedKeywords=list(record.matched_indicators),
            createdAt=record.created_at,
        )


class HistoryItem(BaseModel):
    id: str
    result: str
    spamProbability: float
    matchedKeywords: List[str]
    text: str = Field(..., description="Message text, shortened for display")
    createdAt: datetime

    @classmethod
    def from_entry(cls, entry: HistoryEntry) -> "HistoryItem":
        return cls(
            id=entry.id,
            result=entry.verdict.value,
            spamProbability=entry.probability,
            matchedKeywords=list(entry.matched_indicators),
            text=entry.text,
            createdAt=entry.created_at,
        )


class ErrorResponse(BaseModel):
    message: str
