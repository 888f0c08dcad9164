# moodtracker/services/moods.py
import logging
import math
from typing import Any, Mapping, Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session, selectinload

from moodtracker.core.errors import NotFoundError, ValidationError
from moodtracker.models.factor import Factor
from moodtracker.models.mood import MoodEntry, MoodFactor
from moodtracker.schemas.mood import MoodEntryDetailOut, MoodEntryOut, MoodHistoryFilters
from moodtracker.services.result import ServiceResult, service_operation
from moodtracker.services.validators import (
    require_id,
    validate_history_filters,
    validate_mood_entry,
    validate_mood_patch,
)

logger = logging.getLogger(__name__)

NOT_FOUND = "Mood entry not found or not authorized"


def entry_payload(entry: MoodEntry, with_factors: bool = False) -> dict:
    schema = MoodEntryDetailOut if with_factors else MoodEntryOut
    return schema.model_validate(entry).model_dump(mode="json")


def _owned_entry(db: Session, user_id: int, entry_id: int) -> Optional[MoodEntry]:
    return (
        db.query(MoodEntry)
        .filter(MoodEntry.entry_id == entry_id, MoodEntry.user_id == user_id)
        .first()
    )


@service_operation
def create_mood_entry(db: Session, user_id: int, data: Mapping[str, Any]) -> ServiceResult:
    """Insert a mood entry and its factor attachments in one transaction.

    Either the entry and every attachment commit, or nothing does.
    """
    entry_in = validate_mood_entry(data)

    factor_ids = [f.factor_id for f in entry_in.factors]
    if factor_ids:
        known = {
            fid for (fid,) in db.query(Factor.factor_id).filter(Factor.factor_id.in_(factor_ids)).all()
        }
        missing = [fid for fid in factor_ids if fid not in known]
        if missing:
            raise ValidationError(f"Unknown factor_id: {missing[0]}")

    entry = MoodEntry(
        user_id=user_id,
        mood=entry_in.mood,
        mood_rating=entry_in.mood_rating,
        notes=entry_in.notes,
        location=entry_in.location,
    )
    db.add(entry)
    db.flush()

    for f in entry_in.factors:
        db.add(MoodFactor(entry_id=entry.entry_id, factor_id=f.factor_id, intensity=f.intensity))

    db.commit()
    db.refresh(entry)

    logger.info("✅ Mood entry created: entry_id=%s user_id=%s factors=%d",
                entry.entry_id, user_id, len(entry_in.factors))
    return ServiceResult.success(entry_payload(entry), "Mood entry created successfully")


def _apply_history_filters(query: Query, filters: MoodHistoryFilters) -> Query:
    if filters.from_ is not None:
        query = query.filter(MoodEntry.timestamp >= filters.from_)
    if filters.to is not None:
        query = query.filter(MoodEntry.timestamp <= filters.to)
    if filters.rating is not None:
        query = query.filter(MoodEntry.mood_rating == filters.rating)
    if filters.mood is not None:
        query = query.filter(func.lower(MoodEntry.mood) == filters.mood.lower())
    return query


@service_operation
def get_mood_entries_by_user_id(db: Session, user_id: int,
                                filters: Optional[Mapping[str, Any]] = None) -> ServiceResult:
    f = validate_history_filters(filters)

    scoped = _apply_history_filters(db.query(MoodEntry).filter(MoodEntry.user_id == user_id), f)
    # the count sees exactly the same filters as the page
    total = scoped.order_by(None).count()

    entries = (
        scoped.order_by(MoodEntry.timestamp.desc(), MoodEntry.entry_id.desc())
        .offset((f.page - 1) * f.limit)
        .limit(f.limit)
        .all()
    )

    pagination = {
        "totalItems": total,
        "totalPages": math.ceil(total / f.limit),
        "currentPage": f.page,
        "pageSize": f.limit,
    }
    return ServiceResult.success([entry_payload(e) for e in entries], pagination=pagination)


@service_operation
def get_mood_entry(db: Session, user_id: int, entry_id: Any) -> ServiceResult:
    require_id(entry_id, "entry")
    entry = (
        db.query(MoodEntry)
        .options(selectinload(MoodEntry.factors))
        .filter(MoodEntry.entry_id == entry_id, MoodEntry.user_id == user_id)
        .first()
    )
    if not entry:
        raise NotFoundError(NOT_FOUND)
    return ServiceResult.success(entry_payload(entry, with_factors=True))


@service_operation
def update_mood_entry(db: Session, user_id: int, entry_id: Any, updates: Mapping[str, Any]) -> ServiceResult:
    require_id(entry_id, "entry")
    if not _owned_entry(db, user_id, entry_id):
        raise NotFoundError(NOT_FOUND)

    # model field order keeps the SET clause stable
    fields = validate_mood_patch(updates).model_dump(exclude_unset=True)

    db.query(MoodEntry).filter(
        MoodEntry.entry_id == entry_id, MoodEntry.user_id == user_id
    ).update(fields, synchronize_session=False)
    db.commit()

    entry = _owned_entry(db, user_id, entry_id)
    db.refresh(entry)
    logger.info("✅ Mood entry updated: entry_id=%s fields=%s", entry_id, list(fields))
    return ServiceResult.success(entry_payload(entry), "Mood entry updated successfully")


@service_operation
def delete_mood_entry(db: Session, user_id: int, entry_id: Any) -> ServiceResult:
    require_id(entry_id, "entry")
    deleted = (
        db.query(MoodEntry)
        .filter(MoodEntry.entry_id == entry_id, MoodEntry.user_id == user_id)
        .delete(synchronize_session=False)
    )
    if deleted == 0:
        raise NotFoundError(NOT_FOUND)
    db.commit()

    logger.info("🗑️ Mood entry deleted: entry_id=%s user_id=%s", entry_id, user_id)
    return ServiceResult.success(None, "Mood entry deleted successfully")
