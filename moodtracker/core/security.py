# moodtracker/core/security.py
from datetime import timedelta
from typing import Any, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from moodtracker.core.config import Settings
from moodtracker.core.errors import AuthError, ForbiddenError
from moodtracker.core.timezone import utc_now
from moodtracker.db.session import get_db
from moodtracker.models.user import User

BCRYPT_ROUNDS = 10

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)
_security = HTTPBearer(auto_error=False)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(settings: Settings, user_id: int, email: Optional[str] = None) -> str:
    """Signed bearer token carrying the user id (and email), valid for JWT_EXPIRE_MINUTES"""
    expire = utc_now() + timedelta(minutes=settings.jwt_expire_minutes)
    payload: Dict[str, Any] = {"user_id": user_id, "exp": expire}
    if email:
        payload["email"] = email
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_alg)


def decode_access_token(settings: Settings, token: str) -> Dict[str, Any]:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_alg])
    except JWTError:
        raise AuthError("Invalid token")

    user_id = payload.get("user_id")
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise AuthError("Invalid token")
    return payload


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_current_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(_security),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the caller from the Authorization: Bearer header"""
    if creds is None or creds.scheme.lower() != "bearer" or not creds.credentials:
        raise AuthError("Missing token")

    payload = decode_access_token(settings, creds.credentials)

    # token of a deleted account
    user = db.query(User).filter(User.user_id == payload["user_id"]).first()
    if not user:
        raise AuthError("Invalid token")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise ForbiddenError("Admin privileges required")
    return user
