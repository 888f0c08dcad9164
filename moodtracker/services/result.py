# moodtracker/services/result.py
import functools
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from moodtracker.core.errors import DomainError, StorageError

logger = logging.getLogger(__name__)


@dataclass
class ServiceResult:
    """Uniform outcome of a service operation: data or an error, never both."""

    ok: bool
    data: Any = None
    message: Optional[str] = None
    error: Optional[DomainError] = None
    pagination: Optional[Dict[str, int]] = None
    extra: Optional[Dict[str, Any]] = None

    @classmethod
    def success(cls, data=None, message=None, pagination=None, **extra) -> "ServiceResult":
        return cls(ok=True, data=data, message=message, pagination=pagination, extra=extra or None)

    @classmethod
    def failure(cls, error: DomainError) -> "ServiceResult":
        return cls(ok=False, error=error)

    @property
    def status_code(self) -> int:
        return self.error.status_code if self.error else 200

    def to_envelope(self) -> Dict[str, Any]:
        if not self.ok:
            return {"success": False, "error": self.error.message}

        body: Dict[str, Any] = {"success": True}
        if self.message is not None:
            body["message"] = self.message
        if self.extra:
            body.update(self.extra)
        body["data"] = self.data
        if self.pagination is not None:
            body["pagination"] = self.pagination
        return body


def service_operation(func):
    """Turn raised domain errors into failed results.

    The wrapped function takes the session as its first argument. Store
    failures roll the session back and surface as ``StorageError``.
    """

    @functools.wraps(func)
    def wrapper(db: Session, *args, **kwargs) -> ServiceResult:
        try:
            return func(db, *args, **kwargs)
        except DomainError as e:
            db.rollback()
            logger.info("%s rejected: %s", func.__name__, e.message)
            return ServiceResult.failure(e)
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("%s failed in the store", func.__name__)
            return ServiceResult.failure(StorageError(f"Database error: {e.__class__.__name__}"))

    return wrapper
