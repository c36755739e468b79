# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import Flask, current_app, g, request

from attendance_backend.application.use_cases.devadmin.verify_session import (
    VerifyDevAdminSessionUseCase,
)
from attendance_backend.domain.devadmin import SessionClaims, TokenInvalidError
from attendance_backend.infrastructure.session_cookies import SessionCookieManager
from attendance_backend.shared.logging import logger

_EXTENSION_KEY = "devadmin_guard"


class DevAdminGuard:
    """Authenticates a request from the devadmin cookie only (never a header)."""

    def __init__(
        self, *, verify_use_case: VerifyDevAdminSessionUseCase, cookies: SessionCookieManager
    ) -> None:
        self._verify = verify_use_case
        self._cookies = cookies

    def init_app(self, app: Flask) -> None:
        app.extensions[_EXTENSION_KEY] = self

    def authenticate(self) -> SessionClaims:
        claims = self._verify.execute(self._cookies.extract(request))
        g.devadmin = claims
        return claims

    def is_devadmin(self) -> bool:
        try:
            self.authenticate()
        except TokenInvalidError:
            return False
        return True


def require_devadmin(func: Callable[..., Any]) -> Callable[..., Any]:
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        guard: DevAdminGuard | None = current_app.extensions.get(_EXTENSION_KEY)
        if guard is None:
            logger.error("devadmin guard not configured on this app, denying access")
            raise TokenInvalidError()

        try:
            claims = guard.authenticate()
        except TokenInvalidError as exc:
            logger.warning(
                f"Devadmin access denied ({exc.reason.value}) on {request.method} {request.path}"
            )
            raise

        logger.debug(f"Devadmin access granted: {claims.subject} on {request.method} {request.path}")
        return func(*args, **kwargs)

    return wrapper


__all__ = ["DevAdminGuard", "require_devadmin"]
