# COMPONENT: API REQUEST / RESPONSE LOGGING MIDDLEWARE
# REQUIREMENTS SATISFIED: backend observability and debugging support

"""
src/api/middleware/log_requests.py

ASGI middleware that logs one line per HTTP request.

Each request is tagged with a short request id, and the method, path,
status code and latency are logged at INFO. JSON request bodies are also
logged at DEBUG, truncated. Multipart bodies (photo and video uploads) are
never captured, since they can run to hundreds of megabytes.

Non-HTTP ASGI events pass through untouched.
"""
import logging
import time
import uuid

from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger("http")

MAX_LOGGED_BODY = 2048


def _content_type(scope: Scope) -> str:
    for name, value in scope.get("headers") or []:
        if name == b"content-type":
            return value.decode("latin-1")
    return ""


class RequestLogger:
    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        rid = str(uuid.uuid4())[:8]
        method = scope.get("method")
        path = scope.get("path")
        capture = _content_type(scope).startswith("application/json")

        body_bytes = b""

        async def recv_wrapper() -> Message:
            nonlocal body_bytes
            msg = await receive()
            if capture and msg["type"] == "http.request" and len(body_bytes) < MAX_LOGGED_BODY:
                body_bytes += msg.get("body", b"")
            return msg

        status_code = None

        async def send_wrapper(message: Message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        start = time.time()
        try:
            await self.app(scope, recv_wrapper, send_wrapper)
        finally:
            duration_ms = round((time.time() - start) * 1000, 2)
            logger.info("[RID %s] %s %s -> %s (%sms)", rid, method, path, status_code, duration_ms)
            if body_bytes:
                logger.debug(
                    "[RID %s] request body: %s",
                    rid,
                    body_bytes[:MAX_LOGGED_BODY].decode("utf-8", errors="replace"),
                )
