"""
Structured JSON logging.

Every record is written to stdout as a single JSON object so the hosting
platform's collector can index it. Records emitted while handling a request
carry its request_id, endpoint and client address. Keys that look like
credentials (SMTP password, bearer tokens, Mongo URI) never reach the output.
"""

import json
import logging
import os
import sys
import time
import uuid
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable, Dict, TypeVar

from flask import Flask, g, request


F = TypeVar("F", bound=Callable[..., Any])

REQUEST_ID_HEADER = "X-Request-ID"
MAX_VALUE_LENGTH = 1000

# Probes hit these every few seconds
QUIET_PATHS = frozenset(["/", "/health"])


class JsonFormatter(logging.Formatter):
    """Render a LogRecord as one JSON line."""

    SENSITIVE_PATTERNS = frozenset([
        "password", "pass", "secret", "token", "api_key", "apikey",
        "authorization", "auth", "credential", "private", "uri",
    ])

    CONTEXT_ATTRIBUTES = ("request_id", "endpoint", "client_ip")

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "severity": record.levelname,
            "message": record.getMessage(),
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "logger": record.name,
        }

        entry.update(self._request_context())

        fields = getattr(record, "extra_fields", None) or {}
        entry.update(self.redact(fields))

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        if record.levelno >= logging.WARNING:
            entry["source"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(entry, ensure_ascii=False, default=str)

    def _request_context(self) -> Dict[str, Any]:
        try:
            return {
                attr: getattr(g, attr)
                for attr in self.CONTEXT_ATTRIBUTES
                if getattr(g, attr, None)
            }
        except RuntimeError:
            # No application context
            return {}

    @classmethod
    def is_sensitive(cls, key: str) -> bool:
        key_lower = key.lower()
        return any(pattern in key_lower for pattern in cls.SENSITIVE_PATTERNS)

    @classmethod
    def redact(cls, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Drop sensitive keys and truncate long string values."""
        clean = {}
        for key, value in fields.items():
            if cls.is_sensitive(key):
                continue
            if isinstance(value, str) and len(value) > MAX_VALUE_LENGTH:
                value = value[:MAX_VALUE_LENGTH] + "... [truncated]"
            clean[key] = value
        return clean


class StructuredLogger(logging.LoggerAdapter):
    """Logger adapter that merges bound fields with per-call extra_fields."""

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra = kwargs.get("extra", {})
        extra_fields = extra.pop("extra_fields", {})

        if self.extra:
            extra_fields = {**self.extra, **extra_fields}

        kwargs["extra"] = {**extra, "extra_fields": extra_fields}
        return msg, kwargs


def _resolve_level() -> int:
    level = logging.getLevelName(os.environ.get("LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str = "icia-landing") -> StructuredLogger:
    """
    Return a JSON logger for the given name.

    The stdout handler is attached once per underlying logger; the level
    comes from LOG_LEVEL (default INFO).
    """
    base_logger = logging.getLogger(name)

    if not base_logger.handlers:
        base_logger.setLevel(_resolve_level())

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonFormatter())

        base_logger.addHandler(handler)
        base_logger.propagate = False

    return StructuredLogger(base_logger, {})


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    return forwarded.split(",")[0].strip() or request.remote_addr or ""


def log_request_context(app: Flask) -> None:
    """
    Register request hooks that bind log context and log each response.

    The request id is taken from X-Request-ID when the proxy sets one and
    is echoed back on the response.
    """
    request_logger = get_logger("icia-landing.request")

    @app.before_request
    def bind_request_context() -> None:
        g.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        g.endpoint = request.endpoint
        g.client_ip = _client_ip()
        g.start_time = time.monotonic()

    @app.after_request
    def log_response(response):
        duration_ms = None
        if hasattr(g, "start_time"):
            duration_ms = int((time.monotonic() - g.start_time) * 1000)

        if getattr(g, "request_id", None):
            response.headers.setdefault(REQUEST_ID_HEADER, g.request_id)

        level = logging.DEBUG if request.path in QUIET_PATHS else logging.INFO
        request_logger.log(
            level,
            f"{request.method} {request.path} -> {response.status_code}",
            extra={"extra_fields": {
                "method": request.method,
                "path": request.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            }}
        )

        return response


def log_duration(operation: str) -> Callable[[F], F]:
    """
    Time the wrapped call and log its outcome under ``operation``.

    Failures are logged at WARNING and re-raised; callers decide whether
    the error is fatal.
    """
    def decorator(func: F) -> F:
        op_logger = get_logger(func.__module__)

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.monotonic()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                op_logger.warning(
                    f"{operation} failed: {e}",
                    extra={"extra_fields": {
                        "operation": operation,
                        "duration_ms": int((time.monotonic() - start) * 1000),
                        "status": "error",
                        "error_type": type(e).__name__,
                    }}
                )
                raise
            op_logger.info(
                f"{operation} completed",
                extra={"extra_fields": {
                    "operation": operation,
                    "duration_ms": int((time.monotonic() - start) * 1000),
                    "status": "success",
                }}
            )
            return result
        return wrapper  # type: ignore
    return decorator


logger = get_logger("icia-landing")
