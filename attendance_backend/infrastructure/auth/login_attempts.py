# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock

from attendance_backend.shared.logging import logger


@dataclass
class LoginAttempt:
    timestamp: float
    success: bool


class LoginAttemptsTracker:
    """Locks a client key out after repeated failed devadmin logins."""

    def __init__(
        self,
        *,
        max_attempts: int = 5,
        lockout_duration: float = 15 * 60,
        attempt_window: float = 60 * 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_attempts = max_attempts
        self.lockout_duration = lockout_duration
        self.attempt_window = attempt_window
        self._clock = clock
        self._attempts: dict[str, deque[LoginAttempt]] = {}
        self._lock = Lock()
        self._lockouts: dict[str, float] = {}  # key -> unlock_time
        self._last_prune = clock()

    def record_attempt(self, key: str, success: bool) -> None:
        with self._lock:
            now = self._clock()
            self._prune(now)

            if success:
                self._attempts.pop(key, None)
                if self._lockouts.pop(key, None) is not None:
                    logger.info(f"login_attempts: cleared lockout for key={key}")
                return

            attempts = self._attempts.setdefault(key, deque(maxlen=self.max_attempts * 2))
            attempts.append(LoginAttempt(timestamp=now, success=False))
            self._check_and_lock(key, now)

    def lockout_remaining(self, key: str) -> float:
        with self._lock:
            unlock_time = self._lockouts.get(key)
            if unlock_time is None:
                return 0.0

            remaining = unlock_time - self._clock()
            if remaining <= 0:
                del self._lockouts[key]
                logger.info(f"login_attempts: lockout expired for key={key}")
                return 0.0
            return remaining

    def _recent_failures(self, key: str, now: float) -> list[LoginAttempt]:
        cutoff = now - self.attempt_window
        return [a for a in self._attempts.get(key, ()) if not a.success and a.timestamp > cutoff]

    def _check_and_lock(self, key: str, now: float) -> None:
        failed = self._recent_failures(key, now)
        if len(failed) >= self.max_attempts:
            self._lockouts[key] = now + self.lockout_duration
            logger.warning(
                f"login_attempts: LOCKED key={key} failed_attempts={len(failed)} "
                f"lockout_duration={self.lockout_duration}s"
            )

    def _prune(self, now: float) -> None:
        # At most once per lockout period; drops keys with nothing left to remember.
        if now - self._last_prune < min(self.attempt_window, self.lockout_duration):
            return
        cutoff = now - self.attempt_window
        for key in [k for k, attempts in self._attempts.items() if not attempts or attempts[-1].timestamp <= cutoff]:
            del self._attempts[key]
        for key in [k for k, unlock_time in self._lockouts.items() if unlock_time <= now]:
            del self._lockouts[key]
        self._last_prune = now


__all__ = ["LoginAttempt", "LoginAttemptsTracker"]
