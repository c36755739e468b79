# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from attendance_backend.domain.users import (
    AuthenticationFailedError,
    IdentityProvider,
    IdentityProviderRejectedError,
    IdentityUser,
)


class GetCurrentUserUseCase:
    def __init__(self, *, identity: IdentityProvider) -> None:
        self._identity = identity

    def execute(self, token: str | None) -> IdentityUser:
        if not token:
            raise AuthenticationFailedError()
        try:
            return self._identity.current_user(token)
        except IdentityProviderRejectedError as exc:
            raise AuthenticationFailedError() from exc


class GetLoginHistoryUseCase:
    def __init__(
        self,
        *,
        identity: IdentityProvider,
        current_user: GetCurrentUserUseCase,
        limit: int = 50,
    ) -> None:
        self._identity = identity
        self._current_user = current_user
        self._limit = limit

    def execute(self, token: str | None) -> Sequence[Mapping[str, Any]]:
        if not token:
            raise AuthenticationFailedError()
        user = self._current_user.execute(token)
        return self._identity.login_history(token, user.id, self._limit)
