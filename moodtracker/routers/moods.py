# moodtracker/routers/moods.py
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session

from moodtracker.core.security import get_current_user
from moodtracker.db.session import get_db
from moodtracker.models.user import User
from moodtracker.routers.common import parse_path_id, respond
from moodtracker.services import moods

router = APIRouter()


@router.post("/create-mood-entry")
def create_mood_entry(
    body: Dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return respond(moods.create_mood_entry(db, user.user_id, body), 201)


@router.get("/mood-history")
def mood_history(
    from_: Optional[str] = Query(None, alias="from"),
    to: Optional[str] = None,
    rating: Optional[str] = None,
    mood: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    filters = {"from": from_, "to": to, "rating": rating, "mood": mood, "page": page, "limit": limit}
    return respond(moods.get_mood_entries_by_user_id(db, user.user_id, filters))


@router.get("/mood-entry/{entry_id}")
def get_mood_entry(entry_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return respond(moods.get_mood_entry(db, user.user_id, parse_path_id(entry_id, "entry")))


@router.put("/update-mood-entry/{entry_id}")
def update_mood_entry(
    entry_id: str,
    body: Dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return respond(moods.update_mood_entry(db, user.user_id, parse_path_id(entry_id, "entry"), body))


@router.delete("/delete-mood-entry/{entry_id}")
def delete_mood_entry(entry_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return respond(moods.delete_mood_entry(db, user.user_id, parse_path_id(entry_id, "entry")))
