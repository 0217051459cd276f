# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections import defaultdict, deque
from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps
from threading import Lock

from flask import Request, current_app, jsonify, request

RATE_LIMIT_ENABLED = "RATE_LIMIT_ENABLED"
RATE_LIMIT_REQUESTS = "RATE_LIMIT_REQUESTS"
RATE_LIMIT_WINDOW = "RATE_LIMIT_WINDOW"


@dataclass
class Bucket:
    timestamps: deque[float]


class InMemoryRateLimiter:
    def __init__(self, limit: int, window_seconds: float) -> None:
        self._limit = max(1, int(limit))
        self._window = max(0.1, float(window_seconds))
        self._buckets: dict[str, Bucket] = defaultdict(lambda: Bucket(deque(maxlen=self._limit)))
        self._lock = Lock()

    def allow(self, key: str, *, now: float | None = None) -> bool:
        now = time.monotonic() if now is None else now
        with self._lock:
            bucket = self._buckets[key]
            # Drop old
            while bucket.timestamps and (now - bucket.timestamps[0]) > self._window:
                bucket.timestamps.popleft()
            if len(bucket.timestamps) >= self._limit:
                return False
            bucket.timestamps.append(now)
            return True


def _client_key(req: Request) -> str:
    forwarded = req.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    return forwarded or (req.remote_addr or "unknown")


def rate_limit(limit: int | None = None, window_seconds: float | None = None):
    """Per-client sliding window; unset bounds come from the app config."""

    limiters: dict[tuple[int, float], InMemoryRateLimiter] = {}
    lock = Lock()

    def _limiter() -> InMemoryRateLimiter:
        resolved = (
            limit if limit is not None else int(current_app.config.get(RATE_LIMIT_REQUESTS, 10)),
            window_seconds
            if window_seconds is not None
            else float(current_app.config.get(RATE_LIMIT_WINDOW, 60.0)),
        )
        with lock:
            if resolved not in limiters:
                limiters[resolved] = InMemoryRateLimiter(*resolved)
            return limiters[resolved]

    def decorator(f: Callable):
        @wraps(f)
        def wrapper(*args, **kwargs):
            if not current_app.config.get(RATE_LIMIT_ENABLED, True):
                return f(*args, **kwargs)
            key = f"{request.path}:{_client_key(request)}"
            if not _limiter().allow(key):
                return jsonify({"error": "rate_limited"}), 429
            return f(*args, **kwargs)

        return wrapper

    return decorator


__all__ = [
    "InMemoryRateLimiter",
    "RATE_LIMIT_ENABLED",
    "RATE_LIMIT_REQUESTS",
    "RATE_LIMIT_WINDOW",
    "rate_limit",
]
