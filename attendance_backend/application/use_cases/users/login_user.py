# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from attendance_backend.domain.users import (
    AuthenticationFailedError,
    AuthSession,
    ClientInfo,
    IdentityProvider,
    IdentityProviderRejectedError,
    IdentityProviderUnavailableError,
    LoginAuditRecord,
    LoginStatus,
)
from attendance_backend.infrastructure.audit import BackgroundAuditDispatcher
from attendance_backend.shared.logging import logger

UPSTREAM_FAILURE_REASON = "Identity provider unavailable"


class LoginUserUseCase:
    def __init__(
        self,
        *,
        identity: IdentityProvider,
        audit: BackgroundAuditDispatcher,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._identity = identity
        self._audit = audit
        self._clock = clock

    def execute(
        self, identifier: str, password: str, remember_me: bool, client: ClientInfo
    ) -> AuthSession:
        try:
            session = self._identity.authenticate(identifier, password)
        except IdentityProviderRejectedError as exc:
            self._audit_failure(identifier, client, exc.message)
            raise AuthenticationFailedError() from exc
        except IdentityProviderUnavailableError as exc:
            self._audit_failure(identifier, client, f"{UPSTREAM_FAILURE_REASON} ({exc.reason})")
            raise

        self._audit.submit(
            LoginAuditRecord(
                status=LoginStatus.SUCCESS,
                timestamp=self._clock(),
                client=client,
                user_reference=session.user.id,
                remember_me=remember_me,
            )
        )
        logger.info(f"auth.login: ok user_id={session.user.id} remember_me={remember_me}")
        return session

    def _audit_failure(self, identifier: str, client: ClientInfo, reason: str) -> None:
        self._audit.submit(
            LoginAuditRecord(
                status=LoginStatus.FAILED,
                timestamp=self._clock(),
                client=client,
                identifier=identifier,
                failure_reason=reason,
            )
        )
