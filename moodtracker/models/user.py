# moodtracker/models/user.py
from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from moodtracker.core.timezone import utc_now
from moodtracker.db.base import Base

USERNAME_MAX_LENGTH = 30
EMAIL_MAX_LENGTH = 255


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, index=True)
    username = Column(String(USERNAME_MAX_LENGTH), nullable=False)
    email = Column(String(EMAIL_MAX_LENGTH), unique=True, index=True, nullable=False)
    # bcrypt hash, never the plain password
    password = Column(String(255), nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    mood_entries = relationship(
        "MoodEntry", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    journal_entries = relationship(
        "JournalEntry", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
