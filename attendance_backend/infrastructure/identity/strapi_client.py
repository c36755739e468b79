# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from attendance_backend.domain.users import (
    AuthSession,
    IdentityProvider,
    IdentityProviderRejectedError,
    IdentityProviderUnavailableError,
    IdentityUser,
    RegistrationFailedError,
)
from attendance_backend.shared.logging import logger


def _error_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return error.get("message")
    return None


def _records(body: Any) -> list[dict[str, Any]]:
    if isinstance(body, list):
        return body
    if isinstance(body, dict) and isinstance(body.get("data"), list):
        return body["data"]
    return []


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _timeout_option(timeout: float | None) -> dict[str, float]:
    # httpx reads an explicit None as "no timeout"; omit it to keep the client default.
    return {} if timeout is None else {"timeout": timeout}


class StrapiClient(IdentityProvider):
    """Thin httpx client for the Strapi users-permissions and ``logins`` APIs."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
            headers={"Content-Type": "application/json"},
        )

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            with self._client() as http:
                return http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning(f"strapi: {method} {path} failed: {type(exc).__name__}")
            raise IdentityProviderUnavailableError(type(exc).__name__) from exc

    def authenticate(self, identifier: str, password: str) -> AuthSession:
        response = self._request(
            "POST", "/api/auth/local", json={"identifier": identifier, "password": password}
        )
        if response.status_code >= 500:
            logger.warning(f"strapi: login upstream error status={response.status_code}")
            raise IdentityProviderUnavailableError(f"status_{response.status_code}")
        if response.is_error:
            message = _error_message(response)
            logger.info(f"strapi: login rejected status={response.status_code} message={message!r}")
            raise IdentityProviderRejectedError(response.status_code, message)

        body = response.json()
        return AuthSession(jwt=body["jwt"], user=IdentityUser.from_payload(body["user"]))

    def current_user(self, token: str) -> IdentityUser:
        response = self._request("GET", "/api/users/me", headers=_bearer(token))
        if response.is_error:
            raise IdentityProviderRejectedError(response.status_code, _error_message(response))
        return IdentityUser.from_payload(response.json())

    def login_history(self, token: str, user_id: int, limit: int = 50) -> Sequence[Mapping[str, Any]]:
        response = self._request(
            "GET",
            "/api/logins",
            headers=_bearer(token),
            params={
                "filters[user][id][$eq]": user_id,
                "sort": "loginAttemptAt:desc",
                "pagination[limit]": limit,
                "populate": "user",
            },
        )
        if response.is_error:
            logger.warning(f"strapi: login history failed status={response.status_code}")
            raise IdentityProviderUnavailableError("login_history")
        return _records(response.json())

    def find_user_id(self, identifier: str, *, timeout: float | None = None) -> int | None:
        response = self._request(
            "GET",
            "/api/users",
            params={
                "filters[$or][0][username][$eq]": identifier,
                "filters[$or][1][email][$eq]": identifier,
            },
            **_timeout_option(timeout),
        )
        if response.is_error:
            return None
        users = _records(response.json())
        return int(users[0]["id"]) if users else None

    def username_exists(self, username: str) -> bool:
        response = self._request(
            "GET", "/api/users", params={"filters[username][$eq]": username}
        )
        if response.is_error:
            logger.warning(f"strapi: username lookup failed status={response.status_code}")
            raise IdentityProviderUnavailableError("username_lookup")
        return bool(_records(response.json()))

    def register(
        self, username: str, password: str, confirmed: bool = True
    ) -> tuple[IdentityUser, str | None]:
        payload = {"username": username, "password": password, "email": None, "confirmed": confirmed}
        response = self._request("POST", "/api/auth/local/register", json=payload)
        if not response.is_error:
            body = response.json()
            return IdentityUser.from_payload(body["user"]), body.get("jwt")

        logger.info(
            f"strapi: register endpoint refused status={response.status_code}, "
            "falling back to direct user creation"
        )
        response = self._request("POST", "/api/users", json={**payload, "provider": "local"})
        if response.is_error:
            message = _error_message(response)
            logger.warning(f"strapi: user creation failed status={response.status_code} message={message!r}")
            raise RegistrationFailedError(context={"reason": message} if message else None)
        return IdentityUser.from_payload(response.json()), None

    def create_login_record(self, data: Mapping[str, Any], *, timeout: float | None = None) -> None:
        response = self._request("POST", "/api/logins", json={"data": dict(data)}, **_timeout_option(timeout))
        response.raise_for_status()

    def latest_successful_login(self, token: str, user_id: int) -> Mapping[str, Any] | None:
        response = self._request(
            "GET",
            "/api/logins",
            headers=_bearer(token),
            params={
                "filters[user][id][$eq]": user_id,
                "filters[loginStatus][$eq]": "success",
                "sort": "loginAttemptAt:desc",
                "pagination[limit]": 1,
            },
        )
        if response.is_error:
            return None
        records = _records(response.json())
        return records[0] if records else None

    def update_login_record(self, token: str, record_id: int, data: Mapping[str, Any]) -> None:
        response = self._request(
            "PUT", f"/api/logins/{record_id}", headers=_bearer(token), json={"data": dict(data)}
        )
        response.raise_for_status()


__all__ = ["StrapiClient"]
