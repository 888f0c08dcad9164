from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_serializer

from moodtracker.core.timezone import format_time


class FactorAttachmentIn(BaseModel):
    factor_id: int
    intensity: int


class MoodEntryIn(BaseModel):
    mood: str
    mood_rating: int
    notes: Optional[str] = None
    location: Optional[str] = None
    factors: List[FactorAttachmentIn] = []


class MoodEntryPatch(BaseModel):
    """Partial update of a mood entry; only the fields set are written."""

    mood: Optional[str] = None
    mood_rating: Optional[int] = None
    notes: Optional[str] = None
    location: Optional[str] = None


class MoodFactorOut(BaseModel):
    mood_factor_id: int
    factor_id: int
    intensity: int

    class Config:
        from_attributes = True


class MoodEntryOut(BaseModel):
    entry_id: int
    user_id: int
    mood: str
    mood_rating: int
    notes: Optional[str]
    location: Optional[str]
    timestamp: datetime

    class Config:
        from_attributes = True

    @field_serializer("timestamp")
    def _timestamp_utc(self, value: datetime) -> str:
        # SQLite hands back naive values; stored times are always UTC
        return format_time(value)


class MoodEntryDetailOut(MoodEntryOut):
    factors: List[MoodFactorOut] = []


class MoodHistoryFilters(BaseModel):
    from_: Optional[datetime] = None
    to: Optional[datetime] = None
    rating: Optional[int] = None
    mood: Optional[str] = None
    page: int = 1
    limit: int = 10
