# moodtracker/core/config.py
import logging
import os
import secrets
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_ORIGINS = "http://localhost:3000"


def _split_csv(value: Optional[str]) -> Tuple[str, ...]:
    out: List[str] = []
    for s in (value or "").split(","):
        s = s.strip()
        if s and s not in ("*", "null"):
            out.append(s)
    return tuple(out)


def normalize_database_url(url: str) -> str:
    """postgres:// is not accepted by SQLAlchemy; rewrite it to postgresql://"""
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


def database_url_from_env(env) -> str:
    url = env.get("DATABASE_URL")
    if url:
        return normalize_database_url(url)

    host = env.get("DB_HOST")
    name = env.get("DB_NAME")
    if host and name:
        user = env.get("DB_USER", "")
        password = env.get("DB_PASSWORD", "")
        port = env.get("DB_PORT", "5432")
        auth = f"{user}:{password}@" if password else (f"{user}@" if user else "")
        return f"postgresql://{auth}{host}:{port}/{name}"

    logger.warning("DATABASE_URL / DB_HOST not set; using SQLite")
    return "sqlite:///./moodtracker.db"


@dataclass(frozen=True)
class Settings:
    jwt_secret: str
    database_url: str = "sqlite:///./moodtracker.db"
    jwt_alg: str = "HS256"
    jwt_expire_minutes: int = 60 * 24
    port: int = 3000
    allowed_origins: Tuple[str, ...] = (DEFAULT_ORIGINS,)
    admin_emails: Tuple[str, ...] = field(default_factory=tuple)
    log_level: str = "INFO"
    seed_factors: bool = True

    @classmethod
    def from_env(cls, env=None) -> "Settings":
        if env is None:
            load_dotenv(find_dotenv())
            env = os.environ

        # JWT_SECRET is mandatory outside development
        jwt_secret = env.get("JWT_SECRET")
        if not jwt_secret:
            if env.get("ENV") == "development":
                jwt_secret = secrets.token_urlsafe(32)
                logger.warning("⚠️ JWT_SECRET not set, using a temporary secret for this process")
            else:
                raise RuntimeError("JWT_SECRET environment variable is not set")

        origins = _split_csv(env.get("ALLOWED_ORIGINS") or env.get("CLIENT_ORIGIN") or DEFAULT_ORIGINS)

        return cls(
            jwt_secret=jwt_secret,
            database_url=database_url_from_env(env),
            jwt_expire_minutes=int(env.get("JWT_EXPIRE_MINUTES", "1440")),
            port=int(env.get("PORT", "3000")),
            allowed_origins=origins,
            admin_emails=tuple(e.lower() for e in _split_csv(env.get("ADMIN_EMAILS"))),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            seed_factors=env.get("SEED_FACTORS", "1") not in ("0", "false", "no"),
        )
