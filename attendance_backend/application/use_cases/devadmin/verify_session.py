# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from attendance_backend.application.services.token_service import TokenService
from attendance_backend.domain.devadmin import SessionClaims, TokenFailure, TokenInvalidError
from attendance_backend.shared.logging import logger


class VerifyDevAdminSessionUseCase:
    def __init__(self, *, tokens: TokenService) -> None:
        self._tokens = tokens

    def execute(self, token: str | None) -> SessionClaims:
        if not token:
            raise TokenInvalidError(TokenFailure.MALFORMED)
        try:
            return self._tokens.verify(token)
        except TokenInvalidError:
            raise
        except Exception as exc:
            logger.error(f"devadmin.verify: unexpected error {type(exc).__name__}")
            raise TokenInvalidError(TokenFailure.MALFORMED) from exc
