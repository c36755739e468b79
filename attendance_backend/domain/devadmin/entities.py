# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

DEVADMIN_ROLE = "devadmin"


@dataclass(slots=True, frozen=True)
class CredentialRecord:
    username: str
    password_hash: str

    @classmethod
    def from_values(cls, username: str | None, password_hash: str | None) -> CredentialRecord | None:
        if not username or not password_hash:
            return None
        return cls(username=username, password_hash=password_hash)


@dataclass(slots=True, frozen=True)
class TokenPolicy:
    secret: str | None
    lifetime: timedelta
    role: str = DEVADMIN_ROLE
    algorithm: str = "HS256"
    production: bool = False


@dataclass(slots=True, frozen=True)
class SessionClaims:

    subject: str
    role: str
    issued_at: datetime
    expires_at: datetime
