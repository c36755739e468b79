# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, ClassVar


@dataclass(slots=True)
class AppError(Exception):
    """Error that renders as ``{"success": false, "error": <code>}``."""

    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": False, "error": self.code}
        if self.context:
            payload["context"] = dict(self.context)
        return payload

    def response_headers(self) -> dict[str, str]:
        return {}


class DomainError(AppError):
    default_code: ClassVar[str] = "domain_error"
    default_status: ClassVar[HTTPStatus] = HTTPStatus.BAD_REQUEST

    def __init__(self, *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(code=self.default_code, status=self.default_status, context=context)


class AuthenticationError(DomainError):
    """Base for every 401.

    The body never carries context, so callers cannot tell an unknown user,
    a wrong password or a bad token apart.
    """

    default_code = "authentication_failed"
    default_status = HTTPStatus.UNAUTHORIZED

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "error": self.default_code}


class InfrastructureError(AppError):
    def __init__(
        self,
        code: str = "infrastructure_error",
        *,
        status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(code=code, status=status, context=context)


class ValidationError(AppError):
    def __init__(self, *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(
            code="validation_error",
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            context=context,
        )


class ThrottledError(AppError):
    """429 with a ``Retry-After`` header when the wait is known."""

    def __init__(self, code: str, retry_after: float | None = None) -> None:
        context = None
        if retry_after is not None:
            context = {"retry_after_seconds": math.ceil(retry_after)}
        super().__init__(code=code, status=HTTPStatus.TOO_MANY_REQUESTS, context=context)
        self.retry_after = retry_after

    def response_headers(self) -> dict[str, str]:
        if self.retry_after is None:
            return {}
        return {"Retry-After": str(max(1, math.ceil(self.retry_after)))}


class RateLimitedError(ThrottledError):
    def __init__(self, retry_after: float | None = None) -> None:
        super().__init__("rate_limited", retry_after)
