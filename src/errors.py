"""Domain level exceptions for the media upload boundary."""

from __future__ import annotations

__all__ = [
    "MediaError",
    "ValidationError",
    "Unauthorized",
    "NotFoundError",
    "StorageError",
    "StorageUnavailable",
    "StorageWriteError",
    "StorageReadError",
    "KeyResolutionFailure",
]


class MediaError(Exception):
    """Base class for application specific errors."""


class ValidationError(MediaError):
    """Raised when a folder, content type or size is not allowed."""


class Unauthorized(MediaError):
    """Raised when an admin-only operation is attempted without a valid token."""


class NotFoundError(MediaError):
    """Raised when a record could not be located."""


class StorageError(MediaError):
    """Base class for object store failures."""


class StorageUnavailable(StorageError):
    """Raised when object store credentials were not configured at startup."""


class StorageWriteError(StorageError):
    """Raised when the backend reports a failed put, delete or signing call."""


class StorageReadError(StorageError):
    """Raised when the backend reports a failed read."""


class KeyResolutionFailure(MediaError):
    """Raised internally when a URL cannot be safely mapped back to a key."""
