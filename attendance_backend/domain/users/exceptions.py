# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from attendance_backend.shared.errors.base import (
    AuthenticationError,
    DomainError,
    InfrastructureError,
)


class AuthenticationFailedError(AuthenticationError):
    pass


class UserAlreadyExistsError(DomainError):
    default_code = "username_taken"
    default_status = HTTPStatus.CONFLICT


class RegistrationFailedError(DomainError):
    default_code = "registration_failed"


class IdentityProviderRejectedError(DomainError):
    """Strapi answered with an error status; ``message`` is its error text."""

    default_code = "identity_provider_rejected"
    default_status = HTTPStatus.UNAUTHORIZED

    def __init__(self, upstream_status: int, message: str | None = None) -> None:
        super().__init__()
        self.upstream_status = upstream_status
        self.message = message or "rejected"


class IdentityProviderUnavailableError(InfrastructureError):
    def __init__(self, reason: str = "") -> None:
        super().__init__("identity_provider_unavailable", status=HTTPStatus.BAD_GATEWAY)
        self.reason = reason


class AuditWriteFailedError(InfrastructureError):
    def __init__(self, reason: str = "") -> None:
        super().__init__("audit_write_failed")
        self.reason = reason
