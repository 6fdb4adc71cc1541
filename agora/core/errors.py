"""Exception taxonomy shared by services and the HTTP layer."""
from __future__ import annotations


class AgoraError(Exception):
    """Base error carrying the message and HTTP status sent to the caller."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AgoraError):
    """Raised when a required field is missing or a value is not accepted."""

    status_code = 400


class AuthorizationError(AgoraError):
    """Raised when the caller is neither the owner nor the admin."""

    status_code = 403


class NotFoundError(AgoraError):
    """Raised when an id does not exist in its collection."""

    status_code = 404


class StorageError(AgoraError):
    """Raised when the data file cannot be read, parsed or written."""

    status_code = 500
