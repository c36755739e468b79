# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass

from flask import Request, Response

from attendance_backend.shared.logging import logger


@dataclass(slots=True, frozen=True)
class CookiePolicy:
    name: str
    max_age: int
    secure: bool
    samesite: str = "Strict"
    path: str = "/"
    httponly: bool = True


class SessionCookieManager:
    """Binds a session token to a host-only, HttpOnly cookie.

    ``attach`` and ``clear`` always use the same name, path and flags;
    browsers ignore a deletion whose attributes differ from the original.
    """

    def __init__(self, policy: CookiePolicy) -> None:
        self._policy = policy

    def attach(self, response: Response, token: str, *, max_age: int | None = None) -> None:
        policy = self._policy
        response.set_cookie(
            policy.name,
            token,
            max_age=policy.max_age if max_age is None else max_age,
            path=policy.path,
            secure=policy.secure,
            httponly=policy.httponly,
            samesite=policy.samesite,
        )
        logger.debug(f"session_cookie: set name={policy.name} secure={policy.secure}")

    def clear(self, response: Response) -> None:
        policy = self._policy
        response.delete_cookie(
            policy.name,
            path=policy.path,
            secure=policy.secure,
            httponly=policy.httponly,
            samesite=policy.samesite,
        )
        logger.debug(f"session_cookie: cleared name={policy.name}")

    def extract(self, request: Request) -> str | None:
        value = request.cookies.get(self._policy.name)
        return value or None


__all__ = ["CookiePolicy", "SessionCookieManager"]
