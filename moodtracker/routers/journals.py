# moodtracker/routers/journals.py
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from moodtracker.core.security import get_current_user
from moodtracker.db.session import get_db
from moodtracker.models.user import User
from moodtracker.routers.common import parse_path_id, respond
from moodtracker.services import journals

router = APIRouter()


@router.post("/create-journal-entry")
def create_journal_entry(
    body: Dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    result = journals.create_journal_entry(db, user.user_id, body.get("entry_id"), body.get("content"))
    return respond(result, 201)


@router.get("/journal-history")
def journal_history(
    from_: Optional[str] = Query(None, alias="from"),
    to: Optional[str] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return respond(journals.get_journal_entries(db, user.user_id, {"from": from_, "to": to}))


@router.put("/update-journal-entry/{journal_id}")
def update_journal_entry(
    journal_id: str,
    body: Dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    journal_id = parse_path_id(journal_id, "journal")
    return respond(journals.update_journal_entry(db, user.user_id, journal_id, body.get("content")))


@router.delete("/delete-journal-entry/{journal_id}")
def delete_journal_entry(journal_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    journal_id = parse_path_id(journal_id, "journal")
    return respond(journals.delete_journal_entry(db, user.user_id, journal_id))
