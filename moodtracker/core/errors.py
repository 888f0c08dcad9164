# moodtracker/core/errors.py
"""Domain error taxonomy.

Every error carries the HTTP status the transport layer answers with.
Not-found and ownership failures share a 400 so callers cannot probe for
records owned by someone else.
"""


class DomainError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(DomainError):
    status_code = 400


class AuthError(DomainError):
    status_code = 401


class ForbiddenError(AuthError):
    status_code = 403


class OwnershipError(AuthError):
    status_code = 400


class NotFoundError(DomainError):
    status_code = 400


class ConflictError(DomainError):
    status_code = 400


class StorageError(DomainError):
    status_code = 500
