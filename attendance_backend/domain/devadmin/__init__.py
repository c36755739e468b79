# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import DEVADMIN_ROLE, CredentialRecord, SessionClaims, TokenPolicy
from .exceptions import (
    ConfigurationMissingError,
    InvalidCredentialsError,
    TokenFailure,
    TokenInvalidError,
    TooManyAttemptsError,
)
from .repositories import PasswordHasher

__all__ = [
    "DEVADMIN_ROLE",
    "ConfigurationMissingError",
    "CredentialRecord",
    "InvalidCredentialsError",
    "PasswordHasher",
    "SessionClaims",
    "TokenFailure",
    "TokenInvalidError",
    "TokenPolicy",
    "TooManyAttemptsError",
]
