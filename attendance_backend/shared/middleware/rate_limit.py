# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import wraps
from threading import Lock

from flask import Flask, Request, current_app, request

from attendance_backend.shared.config import SecurityConfig
from attendance_backend.shared.errors import RateLimitedError
from attendance_backend.shared.logging import logger

_EXTENSION_KEY = "rate_limits"


class InMemoryRateLimiter:
    """Sliding-window request counter per key."""

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._limit = max(1, int(limit))
        self._window = max(0.1, float(window_seconds))
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = Lock()
        self._last_sweep = self._clock()

    def acquire(self, key: str) -> float:
        """Record a hit; return 0 when allowed, otherwise seconds until a slot frees."""
        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= self._window:
                self._sweep(now)
            hits = self._hits.setdefault(key, deque())
            while hits and now - hits[0] >= self._window:
                hits.popleft()
            if len(hits) >= self._limit:
                return self._window - (now - hits[0])
            hits.append(now)
            return 0.0

    def _sweep(self, now: float) -> None:
        # Keys whose newest hit has left the window hold no state worth keeping.
        stale = [key for key, hits in self._hits.items() if not hits or now - hits[-1] >= self._window]
        for key in stale:
            del self._hits[key]
        self._last_sweep = now


@dataclass
class _RateLimitState:
    enabled: bool
    default_limit: int
    default_window: float
    limiters: dict[str, InMemoryRateLimiter] = field(default_factory=dict)
    lock: Lock = field(default_factory=Lock)

    def limiter(self, name: str, limit: int | None, window: float | None) -> InMemoryRateLimiter:
        with self.lock:
            if name not in self.limiters:
                self.limiters[name] = InMemoryRateLimiter(
                    limit or self.default_limit, window or self.default_window
                )
            return self.limiters[name]


def configure_rate_limit(app: Flask, security: SecurityConfig) -> None:
    app.extensions[_EXTENSION_KEY] = _RateLimitState(
        enabled=security.enable_rate_limit,
        default_limit=security.rate_limit_requests,
        default_window=security.rate_limit_window,
    )


def client_key(req: Request) -> str:
    return req.remote_addr or "unknown"


def rate_limit(limit: int | None = None, window_seconds: float | None = None):
    """Limit a view per client IP; a no-op on apps without ``configure_rate_limit``."""

    def decorator(f: Callable):
        name = getattr(f, "__qualname__", repr(f))

        @wraps(f)
        def wrapper(*args, **kwargs):
            state: _RateLimitState | None = current_app.extensions.get(_EXTENSION_KEY)
            if state is None or not state.enabled:
                return f(*args, **kwargs)
            key = client_key(request)
            wait = state.limiter(name, limit, window_seconds).acquire(key)
            if wait > 0:
                logger.warning(
                    f"rate_limit: rejected {request.method} {request.path} key={key} "
                    f"retry_after={wait:.1f}s"
                )
                raise RateLimitedError(retry_after=wait)
            return f(*args, **kwargs)

        return wrapper

    return decorator


__all__ = ["InMemoryRateLimiter", "client_key", "configure_rate_limit", "rate_limit"]
