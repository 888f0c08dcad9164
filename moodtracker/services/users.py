# moodtracker/services/users.py
import logging
from typing import Any, Iterable, Mapping

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from moodtracker.core.errors import AuthError, ConflictError, NotFoundError, ValidationError
from moodtracker.core.security import get_password_hash, verify_password
from moodtracker.models.user import User
from moodtracker.schemas.user import UserOut
from moodtracker.services.result import ServiceResult, service_operation
from moodtracker.services.validators import (
    is_valid_email,
    require_id,
    validate_new_user,
    validate_user_patch,
)

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = "User already exists with this email"


def user_payload(user: User) -> dict:
    """User record as returned to clients; the password hash never leaves the service"""
    return UserOut.model_validate(user).model_dump(mode="json")


def _find_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email).first()


def _commit_unique_email(db: Session) -> None:
    # a concurrent signup can pass the lookup above; the unique index decides
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(DUPLICATE_EMAIL)


@service_operation
def create_user(db: Session, username: Any, email: Any, password: Any,
                admin_emails: Iterable[str] = ()) -> ServiceResult:
    validate_new_user(username, email, password)

    if _find_by_email(db, email):
        raise ConflictError(DUPLICATE_EMAIL)

    user = User(
        username=username,
        email=email,
        password=get_password_hash(password),
        is_admin=email.lower() in set(admin_emails),
    )
    db.add(user)
    _commit_unique_email(db)
    db.refresh(user)

    logger.info("✅ User created: user_id=%s", user.user_id)
    return ServiceResult.success(user_payload(user), "User created successfully")


@service_operation
def verify_user(db: Session, email: Any, password: Any) -> ServiceResult:
    if not is_valid_email(email):
        raise ValidationError("Invalid email format")
    if not isinstance(password, str) or not password:
        raise ValidationError("Password is required")

    user = _find_by_email(db, email)
    if not user:
        raise NotFoundError("User not found")
    if not verify_password(password, user.password):
        raise AuthError("Incorrect password")

    logger.info("✅ User logged in: user_id=%s", user.user_id)
    return ServiceResult.success(user_payload(user), "Login successful")


@service_operation
def get_user(db: Session, user_id: Any) -> ServiceResult:
    require_id(user_id, "user")
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return ServiceResult.success(user_payload(user))


@service_operation
def update_user(db: Session, user_id: Any, updates: Mapping[str, Any]) -> ServiceResult:
    require_id(user_id, "user")
    patch = validate_user_patch(updates)
    fields = patch.model_dump(exclude_unset=True)

    if "email" in fields:
        other = _find_by_email(db, fields["email"])
        if other and other.user_id != user_id:
            raise ConflictError(DUPLICATE_EMAIL)
    if "password" in fields:
        fields["password"] = get_password_hash(fields["password"])

    try:
        updated = (
            db.query(User)
            .filter(User.user_id == user_id)
            .update(fields, synchronize_session=False)
        )
    except IntegrityError:
        db.rollback()
        raise ConflictError(DUPLICATE_EMAIL)
    if updated == 0:
        raise NotFoundError("User not found")
    _commit_unique_email(db)

    user = db.query(User).filter(User.user_id == user_id).first()
    db.refresh(user)
    logger.info("✅ User updated: user_id=%s fields=%s", user_id, sorted(k for k in fields if k != "password"))
    return ServiceResult.success(user_payload(user), "User updated successfully")


@service_operation
def delete_user(db: Session, user_id: Any) -> ServiceResult:
    require_id(user_id, "user")
    deleted = db.query(User).filter(User.user_id == user_id).delete(synchronize_session=False)
    if deleted == 0:
        raise NotFoundError("User not found")
    db.commit()

    logger.info("🗑️ User deleted: user_id=%s", user_id)
    return ServiceResult.success(None, "User deleted successfully")
