# moodtracker/routers/auth.py
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from moodtracker.core.config import Settings
from moodtracker.core.security import create_access_token, get_current_user, get_settings
from moodtracker.db.session import get_db
from moodtracker.models.user import User
from moodtracker.routers.common import respond
from moodtracker.schemas.auth import LoginIn, SignupIn
from moodtracker.services import users
from moodtracker.services.result import ServiceResult

router = APIRouter()


def _with_token(result: ServiceResult, settings: Settings) -> ServiceResult:
    if result.ok:
        data = result.data
        token = create_access_token(settings, data["user_id"], data["email"])
        result.extra = {"token": token}
    return result


@router.post("/signup")
def signup(body: SignupIn, settings: Settings = Depends(get_settings), db: Session = Depends(get_db)):
    result = users.create_user(db, body.username, body.email, body.password,
                               admin_emails=settings.admin_emails)
    return respond(_with_token(result, settings), 201)


@router.post("/login")
def login(body: LoginIn, settings: Settings = Depends(get_settings), db: Session = Depends(get_db)):
    result = users.verify_user(db, body.email, body.password)
    return respond(_with_token(result, settings))


@router.get("/me")
def get_me(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return respond(users.get_user(db, user.user_id))


@router.put("/update-user")
def update_me(
    body: Dict[str, Any] = Body(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return respond(users.update_user(db, user.user_id, body))


@router.delete("/delete-user")
def delete_me(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return respond(users.delete_user(db, user.user_id))
