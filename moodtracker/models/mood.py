# moodtracker/models/mood.py
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from moodtracker.core.timezone import utc_now
from moodtracker.db.base import Base

MAX_FACTORS_PER_ENTRY = 3
MOOD_MAX_LENGTH = 100
LOCATION_MAX_LENGTH = 255


class MoodEntry(Base):
    __tablename__ = "mood_entries"
    __table_args__ = (
        CheckConstraint("mood_rating BETWEEN 1 AND 10", name="ck_mood_entries_rating"),
    )

    entry_id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)

    mood = Column(String(MOOD_MAX_LENGTH), nullable=False)
    mood_rating = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)
    location = Column(String(LOCATION_MAX_LENGTH), nullable=True)
    timestamp = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)

    user = relationship("User", back_populates="mood_entries", lazy="select")
    factors = relationship(
        "MoodFactor",
        back_populates="mood_entry",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="MoodFactor.mood_factor_id",
    )
    journal_entries = relationship(
        "JournalEntry", back_populates="mood_entry", cascade="all, delete-orphan", passive_deletes=True
    )


class MoodFactor(Base):
    __tablename__ = "mood_factors"
    __table_args__ = (
        UniqueConstraint("entry_id", "factor_id", name="uq_mood_factors_entry_factor"),
        CheckConstraint("intensity BETWEEN 1 AND 10", name="ck_mood_factors_intensity"),
    )

    mood_factor_id = Column(Integer, primary_key=True, index=True)
    entry_id = Column(Integer, ForeignKey("mood_entries.entry_id", ondelete="CASCADE"), nullable=False, index=True)
    factor_id = Column(Integer, ForeignKey("factors.factor_id", ondelete="CASCADE"), nullable=False, index=True)
    intensity = Column(Integer, nullable=False)

    mood_entry = relationship("MoodEntry", back_populates="factors", lazy="select")
    factor = relationship("Factor", back_populates="attachments", lazy="select")
