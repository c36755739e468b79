# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from attendance_backend.domain.users import IdentityProvider, IdentityUser, UserAlreadyExistsError
from attendance_backend.shared.logging import logger


class RegisterUserUseCase:
    def __init__(self, *, identity: IdentityProvider) -> None:
        self._identity = identity

    def execute(
        self, username: str, password: str, confirmed: bool = True
    ) -> tuple[IdentityUser, str | None]:
        if self._identity.username_exists(username):
            raise UserAlreadyExistsError()
        user, jwt = self._identity.register(username, password, confirmed)
        logger.info(f"auth.register: ok user_id={user.id} username='{user.username}'")
        return user, jwt
