from datetime import datetime

from pydantic import BaseModel, field_serializer

from moodtracker.core.timezone import format_time


class JournalEntryOut(BaseModel):
    journal_id: int
    user_id: int
    entry_id: int
    content: str
    timestamp: datetime

    class Config:
        from_attributes = True

    @field_serializer("timestamp")
    def _timestamp_utc(self, value: datetime) -> str:
        # SQLite hands back naive values; stored times are always UTC
        return format_time(value)
