# moodtracker/models/factor.py
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from moodtracker.db.base import Base

FACTOR_NAME_MAX_LENGTH = 100
FACTOR_ICON_MAX_LENGTH = 255

FACTOR_CATEGORIES = (
    "Sleep",
    "Nutrition",
    "Physical Activity",
    "Social",
    "Work/School",
    "Environment",
    "Mental Health",
    "Substance Use",
    "Technology",
    "Routine",
)


class Factor(Base):
    __tablename__ = "factors"

    factor_id = Column(Integer, primary_key=True, index=True)
    name = Column(String(FACTOR_NAME_MAX_LENGTH), nullable=False)
    category = Column(String(50), nullable=False)
    icon = Column(String(FACTOR_ICON_MAX_LENGTH), nullable=True)

    attachments = relationship(
        "MoodFactor", back_populates="factor", cascade="all, delete-orphan", passive_deletes=True
    )
