from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_serializer

from moodtracker.core.timezone import format_time


class UserOut(BaseModel):
    user_id: int
    username: str
    email: str
    is_admin: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_serializer("created_at")
    def _created_at_utc(self, value: Optional[datetime]) -> Optional[str]:
        return format_time(value)


class UserPatch(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
