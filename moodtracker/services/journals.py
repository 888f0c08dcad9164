# moodtracker/services/journals.py
import logging
from typing import Any, Mapping, Optional

from sqlalchemy.orm import Session

from moodtracker.core.errors import NotFoundError, OwnershipError, ValidationError
from moodtracker.core.timezone import parse_time_bound
from moodtracker.models.journal import JournalEntry
from moodtracker.models.mood import MoodEntry
from moodtracker.schemas.journal import JournalEntryOut
from moodtracker.services.result import ServiceResult, service_operation
from moodtracker.services.validators import require_id, validate_journal_content

logger = logging.getLogger(__name__)


def journal_payload(journal: JournalEntry) -> dict:
    return JournalEntryOut.model_validate(journal).model_dump(mode="json")


@service_operation
def create_journal_entry(db: Session, user_id: int, entry_id: Any, content: Any) -> ServiceResult:
    content = validate_journal_content(content)
    require_id(entry_id, "entry")

    owned = (
        db.query(MoodEntry.entry_id)
        .filter(MoodEntry.entry_id == entry_id, MoodEntry.user_id == user_id)
        .first()
    )
    if not owned:
        raise NotFoundError("Mood entry not found or not authorized")

    journal = JournalEntry(user_id=user_id, entry_id=entry_id, content=content)
    db.add(journal)
    db.commit()
    db.refresh(journal)

    logger.info("✅ Journal entry created: journal_id=%s entry_id=%s", journal.journal_id, entry_id)
    return ServiceResult.success(journal_payload(journal), "Journal entry created successfully")


@service_operation
def get_journal_entries(db: Session, user_id: int,
                        filters: Optional[Mapping[str, Any]] = None) -> ServiceResult:
    filters = filters or {}
    start = parse_time_bound(filters.get("from"), "from")
    end = parse_time_bound(filters.get("to"), "to", end_of_day=True)
    if start and end and start > end:
        raise ValidationError("'from' must not be later than 'to'")

    query = db.query(JournalEntry).filter(JournalEntry.user_id == user_id)
    if start is not None:
        query = query.filter(JournalEntry.timestamp >= start)
    if end is not None:
        query = query.filter(JournalEntry.timestamp <= end)

    journals = query.order_by(JournalEntry.timestamp.desc(), JournalEntry.journal_id.desc()).all()
    return ServiceResult.success([journal_payload(j) for j in journals])


@service_operation
def update_journal_entry(db: Session, user_id: int, journal_id: Any, content: Any) -> ServiceResult:
    content = validate_journal_content(content)
    require_id(journal_id, "journal")

    owner = db.query(JournalEntry.user_id).filter(JournalEntry.journal_id == journal_id).first()
    if owner is None:
        raise NotFoundError("No journal entry with that ID found")
    if owner.user_id != user_id:
        raise OwnershipError("You do not have permission to update this journal entry")

    db.query(JournalEntry).filter(
        JournalEntry.journal_id == journal_id, JournalEntry.user_id == user_id
    ).update({"content": content}, synchronize_session=False)
    db.commit()

    journal = db.query(JournalEntry).filter(JournalEntry.journal_id == journal_id).first()
    db.refresh(journal)
    logger.info("✅ Journal entry updated: journal_id=%s", journal_id)
    return ServiceResult.success(journal_payload(journal), "Journal entry updated successfully")


@service_operation
def delete_journal_entry(db: Session, user_id: int, journal_id: Any) -> ServiceResult:
    require_id(journal_id, "journal")
    deleted = (
        db.query(JournalEntry)
        .filter(JournalEntry.journal_id == journal_id, JournalEntry.user_id == user_id)
        .delete(synchronize_session=False)
    )
    if deleted == 0:
        raise NotFoundError("Journal entry not found or not authorized")
    db.commit()

    logger.info("🗑️ Journal entry deleted: journal_id=%s", journal_id)
    return ServiceResult.success(None, "Journal entry deleted successfully")
