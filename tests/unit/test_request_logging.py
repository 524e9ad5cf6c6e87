# tests/unit/test_request_logging.py
#
# The request logger writes one summary line per request. At DEBUG it also
# logs JSON bodies, cut at MAX_LOGGED_BODY bytes, and never touches
# multipart upload bodies.
import json
import logging

import pytest
from fastapi.testclient import TestClient

from src.api.deps import AuthSettings
from src.api.middleware.log_requests import MAX_LOGGED_BODY
from src.main import create_app
from src.utils.logging import setup_logger

MARKER = b"RAW-UPLOAD-BYTES-0123456789"


@pytest.fixture
def log_file(monkeypatch, tmp_path):
    path = tmp_path / "http.log"
    monkeypatch.setenv("LOG_LEVEL", "2")
    monkeypatch.setenv("LOG_FILE", str(path))
    logger = setup_logger("http")
    yield path
    for h in list(logger.handlers):
        h.close()
        logger.removeHandler(h)
    monkeypatch.setenv("LOG_LEVEL", "0")
    setup_logger("http")


@pytest.fixture
def client(gateway):
    return TestClient(create_app(storage=gateway, auth=AuthSettings(admin_token="s3cret"), clock=lambda: 1))


def read_log(path):
    for h in logging.getLogger("http").handlers:
        h.flush()
    return path.read_text(encoding="utf-8")


def test_multipart_body_never_logged(client, log_file):
    resp = client.post(
        "/api/upload/public",
        files={"file": ("a.jpg", MARKER, "image/jpeg")},
        data={"folder": "banners"},
    )
    assert resp.status_code == 200

    text = read_log(log_file)
    assert "POST /api/upload/public -> 200" in text
    assert MARKER.decode() not in text
    assert "request body" not in text


def test_json_body_truncated(client, log_file):
    raw = json.dumps({"url": "https://unrelated-host/" + "a" * 5000}).encode()
    resp = client.post("/api/upload/confirm", content=raw, headers={"content-type": "application/json"})
    assert resp.status_code == 400

    text = read_log(log_file)
    assert "POST /api/upload/confirm -> 400" in text
    body_lines = [line for line in text.splitlines() if "request body: " in line]
    assert len(body_lines) == 1
    logged = body_lines[0].split("request body: ", 1)[1]
    assert logged == raw[:MAX_LOGGED_BODY].decode()
    assert MAX_LOGGED_BODY == 2048
