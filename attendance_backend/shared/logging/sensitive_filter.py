# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Scrubs credentials, hashes and session tokens from log records."""

from __future__ import annotations

import re
from typing import Any

REDACTED = "***REDACTED***"

_RULES: list[tuple[re.Pattern[str], str]] = [
    # Password hashes (bcrypt, werkzeug scrypt/pbkdf2)
    (re.compile(r"\$2[aby]\$\d{2}\$[./A-Za-z0-9]{53}"), "***HASH***"),
    (re.compile(r"\b(?:scrypt|pbkdf2)(?::[a-z0-9:]+)?\$[^$\s]+\$[a-f0-9]{32,}"), "***HASH***"),
    # Any compact JWT, wherever it appears
    (re.compile(r"\beyJ[\w-]{8,}\.[\w-]{8,}\.[\w-]{8,}"), "***JWT***"),
    # Authorization headers and bearer values
    (re.compile(r"(bearer\s+)[\w.~+/=-]{8,}", re.IGNORECASE), rf"\1{REDACTED}"),
    (re.compile(r"(authorization['\"]?\s*[:=]\s*['\"]?)[^'\"\n,}]{6,}", re.IGNORECASE), rf"\1{REDACTED}"),
    # Session cookies
    (re.compile(r"\b((?:devadmin_token|jwt)=)[^;\s'\"]+"), rf"\1{REDACTED}"),
    # key=value and "key": "value" secrets
    (
        re.compile(
            r"((?:jwt[_-]?secret|secret|password|passwd|token|jwt)(?:\s*=\s*|['\"]\s*:\s*)['\"]?)[^'\"\s,}]+",
            re.IGNORECASE,
        ),
        rf"\1{REDACTED}",
    ),
]


def sanitize_message(message: str) -> str:
    for pattern, replacement in _RULES:
        message = pattern.sub(replacement, message)
    return message


def sanitize_record(record: dict[str, Any]) -> bool:
    """loguru ``filter`` hook: rewrites the message in place, never drops a record."""
    if "message" in record:
        record["message"] = sanitize_message(record["message"])
    return True


__all__ = ["REDACTED", "sanitize_message", "sanitize_record"]
