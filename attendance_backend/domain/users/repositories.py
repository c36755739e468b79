# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from .entities import AuthSession, IdentityUser, LoginAuditRecord


class IdentityProvider(Protocol):
    def authenticate(self, identifier: str, password: str) -> AuthSession: ...
    def current_user(self, token: str) -> IdentityUser: ...
    def login_history(self, token: str, user_id: int, limit: int) -> Sequence[Mapping[str, Any]]: ...
    def find_user_id(self, identifier: str, *, timeout: float | None = None) -> int | None: ...
    def username_exists(self, username: str) -> bool: ...
    def register(self, username: str, password: str, confirmed: bool) -> tuple[IdentityUser, str | None]: ...
    def latest_successful_login(self, token: str, user_id: int) -> Mapping[str, Any] | None: ...
    def update_login_record(self, token: str, record_id: int, data: Mapping[str, Any]) -> None: ...


class AuditSink(Protocol):
    def write(self, record: LoginAuditRecord) -> None: ...
