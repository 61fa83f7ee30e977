"""
Request logging middleware.

Pure ASGI (not BaseHTTPMiddleware) so streaming and file-upload requests pass
through untouched. Each request gets an ``X-Request-ID`` response header and
one completion log line carrying method, path, status, duration and the
sanitized request/response bodies.
"""

import json
import logging
import time
import uuid
from typing import Iterable, List, Optional

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..core.logging_config import filter_sensitive_data, truncate_large_data

logger = logging.getLogger(__name__)

MAX_BODY_LOG = 5000
JSON_CONTENT_TYPES = ("application/json",)


def _sanitize_body(chunks: List[bytes], content_type: Optional[str]) -> Optional[str]:
    """Decode a captured body for logging, masking credentials in JSON payloads."""
    raw = b"".join(chunks)
    if not raw:
        return None
    if content_type and not content_type.startswith(JSON_CONTENT_TYPES):
        return f"<{content_type}, {len(raw)} bytes>"

    text = raw.decode("utf-8", errors="ignore")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return truncate_large_data(text, max_length=MAX_BODY_LOG)
    return truncate_large_data(
        json.dumps(filter_sensitive_data(payload), ensure_ascii=False),
        max_length=MAX_BODY_LOG
    )


def _error_reason(body_text: Optional[str]) -> Optional[str]:
    """Pull ``detail``/``error`` out of an error response body."""
    if not body_text:
        return None
    try:
        payload = json.loads(body_text)
    except json.JSONDecodeError:
        return truncate_large_data(body_text, max_length=500)
    if isinstance(payload, dict):
        for key in ("detail", "error", "message"):
            if payload.get(key):
                return truncate_large_data(str(payload[key]), max_length=500)
    return None


def _header(headers: Iterable, name: bytes) -> Optional[str]:
    for key, value in headers:
        if key.lower() == name:
            return value.decode("latin-1")
    return None


class RequestLoggingMiddleware:
    """Pure ASGI middleware that logs every HTTP request and its response."""

    def __init__(self, app: ASGIApp, exclude_paths: Optional[list] = None):
        """
        Args:
            app: The ASGI application
            exclude_paths: Paths that are passed through without logging
        """
        self.app = app
        self.exclude_paths = set(exclude_paths or ["/health", "/"])

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope.get("path", "") in self.exclude_paths:
            await self.app(scope, receive, send)
            return

        request_id = uuid.uuid4().hex[:12]
        method = scope.get("method", "UNKNOWN")
        path = scope.get("path", "")
        request_type = _header(scope.get("headers", []), b"content-type")
        start_time = time.perf_counter()

        request_chunks: List[bytes] = []
        response_chunks: List[bytes] = []
        status_code = 0
        response_type: Optional[str] = None

        async def logging_receive() -> Message:
            message = await receive()
            if message["type"] == "http.request":
                request_chunks.append(message.get("body", b""))
            return message

        async def logging_send(message: Message) -> None:
            nonlocal status_code, response_type
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
                headers = list(message.get("headers", []))
                response_type = _header(headers, b"content-type")
                headers.append((b"x-request-id", request_id.encode("latin-1")))
                message = {**message, "headers": headers}
            elif message["type"] == "http.response.body":
                response_chunks.append(message.get("body", b""))
            await send(message)

        try:
            await self.app(scope, logging_receive, logging_send)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"Request failed: {method} {path} - {e}",
                exc_info=True,
                extra={"extra_fields": {
                    "request_id": request_id,
                    "method": method,
                    "path": path,
                    "duration_ms": duration_ms,
                }}
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        request_body = _sanitize_body(request_chunks, request_type)
        response_body = _sanitize_body(response_chunks, response_type)
        error_reason = _error_reason(response_body) if status_code >= 400 else None

        if status_code >= 500:
            log_level = logging.ERROR
        elif status_code >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        message = f"{method} {path} - {status_code} ({duration_ms:.2f}ms)"
        if error_reason:
            message += f" | error_reason={error_reason}"

        logger.log(
            log_level,
            message,
            extra={"extra_fields": {
                "request_id": request_id,
                "method": method,
                "path": path,
                "query": scope.get("query_string", b"").decode("utf-8", errors="ignore") or None,
                "status_code": status_code,
                "duration_ms": duration_ms,
                "request_body": request_body,
                "response_body": response_body,
                "error_reason": error_reason,
            }}
        )
