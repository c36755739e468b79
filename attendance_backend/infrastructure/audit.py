# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from datetime import UTC
from enum import Enum
from typing import Any

from attendance_backend.domain.users import (
    AuditSink,
    AuditWriteFailedError,
    LoginAuditRecord,
    LoginStatus,
)
from attendance_backend.infrastructure.identity.strapi_client import StrapiClient
from attendance_backend.shared.logging import logger


class AuditAction(str, Enum):
    # Identity provider users
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    LOGOUT = "logout"
    REGISTER = "register"

    # Devadmin
    DEVADMIN_LOGIN_SUCCESS = "devadmin_login_success"
    DEVADMIN_LOGIN_FAILED = "devadmin_login_failed"
    DEVADMIN_LOGIN_LOCKED = "devadmin_login_locked"
    DEVADMIN_LOGOUT = "devadmin_logout"


class AuditLogger:
    @staticmethod
    def log(
        action: AuditAction,
        subject: str | int | None = None,
        ip_address: str | None = None,
        details: dict[str, Any] | None = None,
        success: bool = True,
    ) -> None:
        safe_details = _sanitize_details(details) if details else {}

        log_message = (
            f"AUDIT: {action.value} | "
            f"subject={subject} | "
            f"ip={ip_address} | "
            f"success={success}"
        )

        if safe_details:
            log_message += f" | details={safe_details}"

        if success:
            logger.info(log_message)
        else:
            logger.warning(log_message)


def _sanitize_details(details: dict[str, Any]) -> dict[str, Any]:
    sensitive_keys = {"password", "token", "jwt", "secret", "hash", "cookie"}

    sanitized = {}
    for key, value in details.items():
        key_lower = key.lower()

        if any(sensitive in key_lower for sensitive in sensitive_keys):
            sanitized[key] = "***REDACTED***"
        else:
            sanitized[key] = value

    return sanitized


audit = AuditLogger()


def audit_log(
    action: AuditAction,
    subject: str | int | None = None,
    ip_address: str | None = None,
    details: dict[str, Any] | None = None,
    success: bool = True,
) -> None:
    audit.log(action, subject, ip_address, details, success)


def login_record_payload(record: LoginAuditRecord, user_id: int | None) -> dict[str, Any]:
    data: dict[str, Any] = {
        "user": user_id,
        "loginStatus": record.status.value,
        "loginAttemptAt": record.timestamp.astimezone(UTC).isoformat(),
        "ipAddress": record.client.ip_address,
        "userAgent": record.client.user_agent,
        "deviceInfo": {
            "browser": record.client.user_agent,
            "platform": record.client.platform,
        },
    }
    if record.status is LoginStatus.FAILED:
        data["failureReason"] = record.failure_reason or "Invalid credentials"
    if record.remember_me is not None:
        data["rememberMe"] = record.remember_me
    return data


class StrapiLoginAuditSink(AuditSink):
    """Writes login attempts to the identity provider's ``logins`` collection."""

    def __init__(
        self,
        client: StrapiClient,
        *,
        timeout: float = 3.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._timeout = timeout
        self._clock = clock

    def write(self, record: LoginAuditRecord) -> None:
        # One deadline covers the user lookup and the record write together.
        deadline = self._clock() + self._timeout
        user_id = record.user_reference
        if user_id is None and record.identifier:
            try:
                user_id = self._client.find_user_id(record.identifier, timeout=self._timeout)
            except Exception as exc:
                logger.debug(f"audit: user lookup failed for failed login: {type(exc).__name__}")

        remaining = deadline - self._clock()
        if remaining <= 0:
            raise AuditWriteFailedError("deadline_exceeded")
        try:
            self._client.create_login_record(login_record_payload(record, user_id), timeout=remaining)
        except Exception as exc:
            raise AuditWriteFailedError(type(exc).__name__) from exc


class BackgroundAuditDispatcher:
    """Runs audit side effects on detached daemon threads.

    Failures are logged and swallowed; callers never wait for or observe them.
    """

    def __init__(self, sink: AuditSink) -> None:
        self._sink = sink

    def submit(self, record: LoginAuditRecord) -> threading.Thread:
        return self.run_detached(f"login_record:{record.status.value}", self._sink.write, record)

    def run_detached(self, name: str, func: Callable[..., Any], *args: Any) -> threading.Thread:
        def _run() -> None:
            try:
                func(*args)
            except AuditWriteFailedError as exc:
                logger.warning(f"audit: {name} write failed ({exc.reason})")
            except Exception as exc:
                logger.warning(f"audit: {name} task failed: {type(exc).__name__}")

        thread = threading.Thread(target=_run, name=f"audit-{name}", daemon=True)
        try:
            thread.start()
        except RuntimeError as exc:
            logger.warning(f"audit: could not start {name} task: {exc}")
        return thread


__all__ = [
    "AuditAction",
    "AuditLogger",
    "BackgroundAuditDispatcher",
    "StrapiLoginAuditSink",
    "audit",
    "audit_log",
    "login_record_payload",
]
