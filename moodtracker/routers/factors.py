# moodtracker/routers/factors.py
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from moodtracker.core.security import require_admin
from moodtracker.db.session import get_db
from moodtracker.models.user import User
from moodtracker.routers.common import parse_path_id, respond
from moodtracker.services import factors

router = APIRouter(prefix="/factors", tags=["factors"])


@router.get("")
def list_factors(db: Session = Depends(get_db)):
    return respond(factors.list_factors(db))


# catalog is global: changes are limited to admins
@router.post("")
def create_factor(
    body: Dict[str, Any] = Body(...),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return respond(factors.create_factor(db, body), 201)


@router.put("/{factor_id}")
def update_factor(
    factor_id: str,
    body: Dict[str, Any] = Body(...),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return respond(factors.update_factor(db, parse_path_id(factor_id, "factor"), body))


@router.delete("/{factor_id}")
def delete_factor(factor_id: str, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    return respond(factors.delete_factor(db, parse_path_id(factor_id, "factor")))
