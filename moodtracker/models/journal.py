# moodtracker/models/journal.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from moodtracker.core.timezone import utc_now
from moodtracker.db.base import Base


class JournalEntry(Base):
    __tablename__ = "journal_entries"

    journal_id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    entry_id = Column(Integer, ForeignKey("mood_entries.entry_id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)

    user = relationship("User", back_populates="journal_entries", lazy="select")
    mood_entry = relationship("MoodEntry", back_populates="journal_entries", lazy="select")
