# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from enum import Enum

from attendance_backend.shared.errors.base import (
    AuthenticationError,
    InfrastructureError,
    ThrottledError,
)


class TokenFailure(str, Enum):
    EXPIRED = "expired"
    SIGNATURE_INVALID = "signature_invalid"
    ROLE_MISMATCH = "role_mismatch"
    MALFORMED = "malformed"


class InvalidCredentialsError(AuthenticationError):
    pass


class TokenInvalidError(AuthenticationError):
    def __init__(self, reason: TokenFailure = TokenFailure.MALFORMED) -> None:
        super().__init__()
        self.reason = reason


class ConfigurationMissingError(InfrastructureError):
    def __init__(self, setting: str) -> None:
        super().__init__("configuration_missing")
        self.setting = setting


class TooManyAttemptsError(ThrottledError):
    def __init__(self, retry_after: float) -> None:
        super().__init__("too_many_attempts", retry_after)
