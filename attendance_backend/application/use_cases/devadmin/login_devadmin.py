# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from attendance_backend.application.services.credential_validator import CredentialValidator
from attendance_backend.application.services.token_service import TokenService
from attendance_backend.domain.devadmin import (
    ConfigurationMissingError,
    InvalidCredentialsError,
    TooManyAttemptsError,
)
from attendance_backend.infrastructure.auth.login_attempts import LoginAttemptsTracker
from attendance_backend.shared.logging import logger


class LoginDevAdminUseCase:
    def __init__(
        self,
        *,
        validator: CredentialValidator,
        tokens: TokenService,
        attempts: LoginAttemptsTracker,
    ) -> None:
        self._validator = validator
        self._tokens = tokens
        self._attempts = attempts

    def execute(self, username: str, password: str, client_key: str) -> str:
        remaining = self._attempts.lockout_remaining(client_key)
        if remaining > 0:
            raise TooManyAttemptsError(retry_after=remaining)

        if not self._validator.validate(username, password):
            self._attempts.record_attempt(client_key, success=False)
            raise InvalidCredentialsError()

        try:
            token = self._tokens.issue(username)
        except ConfigurationMissingError as exc:
            logger.error(f"devadmin.login: cannot issue token, {exc.setting} is not configured")
            raise InvalidCredentialsError() from exc
        except Exception as exc:
            logger.exception("devadmin.login: token issue failed")
            raise InvalidCredentialsError() from exc

        self._attempts.record_attempt(client_key, success=True)
        return token
