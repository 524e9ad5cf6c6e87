# tests/unit/test_logging_and_errors.py
#
# Logging is driven by LOG_LEVEL / LOG_FILE; domain errors map to fixed
# HTTP status codes.
import logging

import pytest

from src.api.errors import http_error, status_for
from src.errors import (
    KeyResolutionFailure,
    NotFoundError,
    StorageReadError,
    StorageUnavailable,
    StorageWriteError,
    Unauthorized,
    ValidationError,
)
from src.utils.logging import setup_logger


@pytest.mark.parametrize("exc,status", [
    (ValidationError("bad"), 400),
    (Unauthorized("no"), 401),
    (NotFoundError("gone"), 404),
    (StorageWriteError("w"), 500),
    (StorageReadError("r"), 502),
    (StorageUnavailable("u"), 503),
    (KeyResolutionFailure("k"), 500),
])
def test_status_mapping(exc, status):
    assert status_for(exc) == status


def test_http_error_passes_message_through():
    err = http_error(ValidationError("Invalid folder specified: 'x'"))
    assert err.status_code == 400
    assert err.detail == "Invalid folder specified: 'x'"


def test_silent_by_default(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    logger = setup_logger("media_lifecycle_test")
    assert logger.level > logging.CRITICAL
    assert logger.handlers == []


def test_log_file(monkeypatch, tmp_path):
    log_file = tmp_path / "app.log"
    monkeypatch.setenv("LOG_LEVEL", "2")
    monkeypatch.setenv("LOG_FILE", str(log_file))

    logger = setup_logger("media_lifecycle_test")
    logger.debug("hello %s", "world")
    for h in logger.handlers:
        h.flush()

    assert logger.level == logging.DEBUG
    assert "hello world" in log_file.read_text(encoding="utf-8")
    for h in list(logger.handlers):
        h.close()
        logger.removeHandler(h)
