"""
Request logging middleware.

Pure ASGI (not BaseHTTPMiddleware) so streamed and file responses pass
through untouched. Each request gets an ``X-Request-ID`` response header and
two log lines: one when it starts, one when it completes with status,
duration and sanitized request/response bodies.
"""

import json
import logging
import time
import uuid
from typing import List, Optional
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..core.logging_config import filter_sensitive_data, truncate_large_data

logger = logging.getLogger(__name__)

MAX_BODY_LOG_CHARS = 2000
TEXT_CONTENT_TYPES = ("application/json", "text/")


def _sanitize_body(data: bytes) -> Optional[str]:
    """Decode a body for logging, masking credentials when it is JSON."""
    if not data:
        return None
    text = data.decode("utf-8", errors="ignore")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return truncate_large_data(text, max_length=MAX_BODY_LOG_CHARS)
    return truncate_large_data(
        json.dumps(filter_sensitive_data(payload), ensure_ascii=False),
        max_length=MAX_BODY_LOG_CHARS,
    )


def _error_reason(body_text: Optional[str]) -> Optional[str]:
    """Pull FastAPI's ``detail`` (or similar) out of an error body."""
    if not body_text:
        return None
    try:
        payload = json.loads(body_text)
    except json.JSONDecodeError:
        return truncate_large_data(body_text, max_length=300)
    if isinstance(payload, dict):
        for key in ("detail", "message", "error"):
            if payload.get(key):
                return truncate_large_data(str(payload[key]), max_length=300)
    return None


class RequestLoggingMiddleware:
    """Logs every HTTP request handled by the app, except excluded paths."""

    def __init__(self, app: ASGIApp, exclude_paths: Optional[List[str]] = None):
        self.app = app
        self.exclude_paths = set(exclude_paths or ["/health", "/"])

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope.get("path", "") in self.exclude_paths:
            await self.app(scope, receive, send)
            return

        start_time = time.time()
        request_id = uuid.uuid4().hex[:12]
        method = scope.get("method", "UNKNOWN")
        path = scope.get("path", "")
        client = scope.get("client")

        request_chunks: List[bytes] = []
        response_chunks: List[bytes] = []
        status_code = 0
        log_response_body = False

        async def logging_receive() -> Message:
            message = await receive()
            if message["type"] == "http.request":
                request_chunks.append(message.get("body", b""))
            return message

        async def logging_send(message: Message) -> None:
            nonlocal status_code, log_response_body
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
                headers = dict(message.get("headers", []))
                content_type = headers.get(b"content-type", b"").decode("latin-1")
                log_response_body = content_type.startswith(TEXT_CONTENT_TYPES)
                message["headers"] = list(message.get("headers", [])) + [
                    (b"x-request-id", request_id.encode("ascii"))
                ]
            elif message["type"] == "http.response.body" and log_response_body:
                response_chunks.append(message.get("body", b""))
            await send(message)

        logger.info(
            f"Request started: {method} {path}",
            extra={"extra_fields": {
                "request_id": request_id,
                "method": method,
                "path": path,
                "client": client[0] if client else None,
            }}
        )

        try:
            await self.app(scope, logging_receive, logging_send)
        except Exception as e:
            logger.error(
                f"Request failed: {method} {path} - {e}",
                exc_info=True,
                extra={"extra_fields": {
                    "request_id": request_id,
                    "duration_ms": round((time.time() - start_time) * 1000, 2),
                }}
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        request_body = _sanitize_body(b"".join(request_chunks))
        response_body = _sanitize_body(b"".join(response_chunks))

        if status_code < 400:
            level = logging.INFO
        elif status_code < 500:
            level = logging.WARNING
        else:
            level = logging.ERROR

        message = f"Request completed: {method} {path} - {status_code} ({duration_ms:.2f}ms)"
        reason = _error_reason(response_body) if status_code >= 400 else None
        if reason:
            message += f" | error_reason={reason}"

        logger.log(
            level,
            message,
            extra={"extra_fields": {
                "request_id": request_id,
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": round(duration_ms, 2),
                "request_body": request_body,
                "response_body": response_body,
            }}
        )
