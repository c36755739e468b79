# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import AuthSession, ClientInfo, IdentityUser, LoginAuditRecord, LoginStatus
from .exceptions import (
    AuditWriteFailedError,
    AuthenticationFailedError,
    IdentityProviderRejectedError,
    IdentityProviderUnavailableError,
    RegistrationFailedError,
    UserAlreadyExistsError,
)
from .repositories import AuditSink, IdentityProvider

__all__ = [
    "AuditSink",
    "AuditWriteFailedError",
    "AuthSession",
    "AuthenticationFailedError",
    "ClientInfo",
    "IdentityProvider",
    "IdentityProviderRejectedError",
    "IdentityProviderUnavailableError",
    "IdentityUser",
    "LoginAuditRecord",
    "LoginStatus",
    "RegistrationFailedError",
    "UserAlreadyExistsError",
]
