# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import jwt

from attendance_backend.domain.devadmin import (
    ConfigurationMissingError,
    SessionClaims,
    TokenFailure,
    TokenInvalidError,
    TokenPolicy,
)
from attendance_backend.shared.logging import logger

_REQUIRED_CLAIMS = ["sub", "role", "iat", "exp"]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenService:
    """Issues and verifies the signed devadmin session token (HS256 JWT)."""

    def __init__(
        self,
        policy: TokenPolicy,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._policy = policy
        self._clock = clock
        self._secret = policy.secret
        if self._secret is None and not policy.production:
            self._secret = secrets.token_urlsafe(48)
            logger.warning(
                "devadmin.token: JWT_SECRET not set, using a random per-process secret "
                "(sessions end on restart); set JWT_SECRET before going to production"
            )
        elif self._secret is None:
            logger.error(
                "devadmin.token: JWT_SECRET not set in production, devadmin tokens will not be issued"
            )

    @property
    def lifetime_seconds(self) -> int:
        return int(self._policy.lifetime.total_seconds())

    def issue(self, subject: str) -> str:
        if self._secret is None:
            raise ConfigurationMissingError("JWT_SECRET")

        issued_at = self._clock()
        payload: dict[str, Any] = {
            "sub": subject,
            "username": subject,
            "role": self._policy.role,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self._policy.lifetime).timestamp()),
        }
        token = jwt.encode(payload, self._secret, algorithm=self._policy.algorithm)
        logger.info(
            f"devadmin.token: issued sub='{subject}' exp={datetime.fromtimestamp(payload['exp'], UTC).isoformat()}"
        )
        return token

    def verify(self, token: str) -> SessionClaims:
        if self._secret is None:
            logger.error("devadmin.token: cannot verify, JWT_SECRET not configured")
            raise TokenInvalidError(TokenFailure.SIGNATURE_INVALID)

        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._secret,
                algorithms=[self._policy.algorithm],
                options={"require": _REQUIRED_CLAIMS, "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidSignatureError as exc:
            raise self._reject(TokenFailure.SIGNATURE_INVALID) from exc
        except jwt.InvalidTokenError as exc:
            raise self._reject(TokenFailure.MALFORMED, str(exc)) from exc

        try:
            issued_at = datetime.fromtimestamp(int(payload["iat"]), UTC)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), UTC)
            subject = str(payload["sub"])
        except (TypeError, ValueError, OverflowError) as exc:
            raise self._reject(TokenFailure.MALFORMED, "bad claim types") from exc

        now = self._clock()
        if issued_at > now:
            raise self._reject(TokenFailure.MALFORMED, "iat in the future")

        # The configured lifetime caps whatever exp the token carries.
        expires_at = min(expires_at, issued_at + self._policy.lifetime)
        if now >= expires_at:
            raise self._reject(TokenFailure.EXPIRED, f"sub='{subject}'")

        if payload.get("role") != self._policy.role:
            raise self._reject(TokenFailure.ROLE_MISMATCH, f"role={payload.get('role')!r}")

        return SessionClaims(
            subject=subject,
            role=str(payload["role"]),
            issued_at=issued_at,
            expires_at=expires_at,
        )

    def classify(self, token: str) -> TokenFailure | None:
        try:
            self.verify(token)
        except TokenInvalidError as exc:
            return exc.reason
        return None

    @staticmethod
    def _reject(reason: TokenFailure, detail: str = "") -> TokenInvalidError:
        suffix = f" ({detail})" if detail else ""
        logger.warning(f"devadmin.token: rejected reason={reason.value}{suffix}")
        return TokenInvalidError(reason)
