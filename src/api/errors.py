"""Translate domain errors into HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException

from src.errors import (
    MediaError,
    NotFoundError,
    StorageReadError,
    StorageUnavailable,
    StorageWriteError,
    Unauthorized,
    ValidationError,
)

ERROR_STATUS = (
    (ValidationError, 400),
    (Unauthorized, 401),
    (NotFoundError, 404),
    (StorageUnavailable, 503),
    (StorageReadError, 502),
    (StorageWriteError, 500),
)


def status_for(exc: MediaError) -> int:
    for kind, status in ERROR_STATUS:
        if isinstance(exc, kind):
            return status
    return 500


def http_error(exc: MediaError) -> HTTPException:
    return HTTPException(status_code=status_for(exc), detail=str(exc))
