# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable
from functools import wraps
from threading import Lock

from flask import Flask, request

from apistarter.shared.errors import ApiError

RATE_LIMITED_MESSAGE = "Too many authentication attempts, please try again later."
GENERAL_RATE_LIMITED_MESSAGE = "Too many requests from this IP, please try again later."


class InMemoryRateLimiter:
    """Sliding-window counter per key.

    Keys whose newest hit is older than the window are swept at most once per
    window, so memory stays bounded by the clients seen in the last window.
    """

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._limit = max(1, int(limit))
        self._window = max(0.1, float(window_seconds))
        self._clock = clock
        self._lock = Lock()
        self._buckets: dict[str, deque[float]] = {}
        self._last_sweep = clock()

    def __len__(self) -> int:
        return len(self._buckets)

    def allow(self, key: str) -> bool:
        with self._lock:
            now = self._clock()
            if now - self._last_sweep > self._window:
                self._sweep(now)

            bucket = self._buckets.get(key)
            if bucket is None:
                bucket = self._buckets[key] = deque(maxlen=self._limit)
            while bucket and (now - bucket[0]) > self._window:
                bucket.popleft()
            if len(bucket) >= self._limit:
                return False
            bucket.append(now)
            return True

    def _sweep(self, now: float) -> None:
        stale = [key for key, hits in self._buckets.items() if not hits or now - hits[-1] > self._window]
        for key in stale:
            del self._buckets[key]
        self._last_sweep = now


def client_address() -> str:
    # Proxy headers are honoured only through ProxyFix, which rewrites remote_addr.
    return request.remote_addr or "unknown"


def rate_limit(limiter: InMemoryRateLimiter | None, message: str = RATE_LIMITED_MESSAGE):
    def decorator(f: Callable):
        if limiter is None:
            return f

        @wraps(f)
        def wrapper(*args, **kwargs):
            if not limiter.allow(f"{request.path}:{client_address()}"):
                raise ApiError.too_many_requests(message)
            return f(*args, **kwargs)

        return wrapper

    return decorator


def configure_rate_limiting(app: Flask, limiter: InMemoryRateLimiter | None) -> None:
    """Apply ``limiter`` to every request, keyed by client address."""
    if limiter is None:
        return

    @app.before_request
    def _limit_all_requests() -> None:
        if not limiter.allow(client_address()):
            raise ApiError.too_many_requests(GENERAL_RATE_LIMITED_MESSAGE)


__all__ = [
    "GENERAL_RATE_LIMITED_MESSAGE",
    "InMemoryRateLimiter",
    "RATE_LIMITED_MESSAGE",
    "client_address",
    "configure_rate_limiting",
    "rate_limit",
]
