# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class LoginStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class IdentityUser:

    id: int
    username: str
    email: str | None = None
    role: Any = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> IdentityUser:
        return cls(
            id=int(payload["id"]),
            username=str(payload.get("username") or ""),
            email=payload.get("email"),
            role=payload.get("role"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role,
        }


@dataclass(slots=True, frozen=True)
class AuthSession:

    jwt: str
    user: IdentityUser


@dataclass(slots=True, frozen=True)
class ClientInfo:

    ip_address: str | None
    user_agent: str = ""
    platform: str = "unknown"


@dataclass(slots=True, frozen=True)
class LoginAuditRecord:
    """One login attempt as stored in the identity provider's login collection."""

    status: LoginStatus
    timestamp: datetime
    client: ClientInfo
    user_reference: int | None = None
    identifier: str | None = None
    failure_reason: str | None = None
    remember_me: bool | None = None
