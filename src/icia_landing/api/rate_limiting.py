"""
Rate Limiting.

Fixed-window request limiting for API endpoints, backed by a
pluggable counter store.
"""

import math
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import wraps
from threading import Lock
from typing import Any, Callable, Dict, Tuple

from flask import request

from icia_landing.core.exceptions import RateLimitExceededError
from icia_landing.infrastructure.logging import get_logger


logger = get_logger(__name__)


@dataclass
class RateLimitEntry:
    """Request counter for one client within the current window."""
    count: int
    reset_at: float  # epoch seconds


class RateLimitStore(ABC):
    """
    Counter store keyed by client id.

    Implementations may live outside the process (shared cache) so
    several instances enforce one limit.
    """

    @abstractmethod
    def increment(self, key: str) -> RateLimitEntry:
        """Count one request for ``key`` and return the updated entry."""

    @abstractmethod
    def sweep_expired(self) -> int:
        """Drop entries whose window has ended. Returns how many were removed."""


class InMemoryRateLimitStore(RateLimitStore):
    """
    Process-local store.

    Correct for a single process only. Expired entries are swept at
    most once per ``sweep_interval_seconds``.
    """

    def __init__(
        self,
        window_seconds: float,
        sweep_interval_seconds: float = 300.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._window_seconds = window_seconds
        self._sweep_interval_seconds = sweep_interval_seconds
        self._clock = clock
        self._entries: Dict[str, RateLimitEntry] = {}
        self._last_sweep = clock()
        self._lock = Lock()

    def increment(self, key: str) -> RateLimitEntry:
        now = self._clock()
        if now - self._last_sweep >= self._sweep_interval_seconds:
            self.sweep_expired()

        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry.reset_at <= now:
                entry = RateLimitEntry(count=1, reset_at=now + self._window_seconds)
                self._entries[key] = entry
            else:
                entry.count += 1
            return RateLimitEntry(count=entry.count, reset_at=entry.reset_at)

    def sweep_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.reset_at <= now]
            for key in expired:
                del self._entries[key]
            self._last_sweep = now

        if expired:
            logger.debug(
                "Swept expired rate limit entries",
                extra={"extra_fields": {"removed": len(expired)}}
            )
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)


class FixedWindowRateLimiter:
    """
    Allows ``max_requests`` per client per window.

    The window starts at a client's first request and never
    resets early.
    """

    def __init__(
        self,
        store: RateLimitStore,
        max_requests: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._max_requests = max_requests
        self._clock = clock

    def is_allowed(self, client_id: str) -> Tuple[bool, int]:
        """
        Count a request and check it against the limit.

        Returns:
            Tuple of (is_allowed, retry_after_seconds)
        """
        entry = self._store.increment(client_id)
        if entry.count <= self._max_requests:
            return True, 0
        retry_after = max(1, math.ceil(entry.reset_at - self._clock()))
        return False, retry_after


def get_client_id() -> str:
    """Client address from proxy headers, first forwarded value wins."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("X-Real-IP", "").strip()
    if real_ip:
        return real_ip
    return "unknown"


def rate_limit(func: Callable) -> Callable:
    """
    Decorator to apply the contact rate limit to an endpoint.

    Usage:
        @api_bp.route("/my-endpoint", methods=["POST"])
        @rate_limit
        def my_endpoint():
            ...
    """
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        from icia_landing.services.container import get_services

        client_id = get_client_id()
        allowed, retry_after = get_services().rate_limiter.is_allowed(client_id)

        if not allowed:
            raise RateLimitExceededError(client_id, retry_after)

        return func(*args, **kwargs)

    return wrapper
