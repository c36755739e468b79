# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from attendance_backend.application.use_cases.users.get_current_user import (
    GetCurrentUserUseCase,
    GetLoginHistoryUseCase,
)
from attendance_backend.application.use_cases.users.login_user import LoginUserUseCase
from attendance_backend.application.use_cases.users.logout_user import LogoutUserUseCase
from attendance_backend.application.use_cases.users.register_user import RegisterUserUseCase
from attendance_backend.domain.users import AuthenticationFailedError
from attendance_backend.infrastructure.audit import AuditAction, audit_log
from attendance_backend.infrastructure.session_cookies import SessionCookieManager
from attendance_backend.interfaces.http.dto.auth import (
    CurrentUserDTO,
    LoginHistoryDTO,
    LoginRequestDTO,
    LoginResponseDTO,
    LogoutResponseDTO,
    RegisterRequestDTO,
    RegisterResponseDTO,
    UserDTO,
)
from attendance_backend.interfaces.http.request_context import (
    get_bearer_token,
    get_client_info,
)
from attendance_backend.shared.errors.validation import raise_validation_error
from attendance_backend.shared.logging import logger
from attendance_backend.shared.middleware.rate_limit import rate_limit

SESSION_MAX_AGE = 24 * 60 * 60
REMEMBER_ME_MAX_AGE = 30 * 24 * 60 * 60


class AuthController:
    """Login/logout/identity routes proxied to the identity provider."""

    def __init__(
        self,
        *,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
        current_user_use_case: GetCurrentUserUseCase,
        login_history_use_case: GetLoginHistoryUseCase,
        register_use_case: RegisterUserUseCase,
        cookies: SessionCookieManager,
        enable_cookie: bool = True,
    ) -> None:
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case
        self._current_user_use_case = current_user_use_case
        self._login_history_use_case = login_history_use_case
        self._register_use_case = register_use_case
        self._cookies = cookies
        self._enable_cookie = enable_cookie

    def _token(self) -> str | None:
        if self._enable_cookie:
            token = self._cookies.extract(request)
            if token:
                return token
        return get_bearer_token()

    @rate_limit(limit=10, window_seconds=60.0)
    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        client = get_client_info()
        try:
            session = self._login_use_case.execute(
                dto.identifier, dto.password, dto.remember_me, client
            )
        except AuthenticationFailedError:
            audit_log(
                AuditAction.LOGIN_FAILED,
                subject=dto.identifier,
                ip_address=client.ip_address,
                success=False,
            )
            raise

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            subject=session.user.id,
            ip_address=client.ip_address,
            details={"remember_me": dto.remember_me},
        )

        payload = LoginResponseDTO(jwt=session.jwt, user=UserDTO(**session.user.to_dict()))
        response = jsonify(payload.model_dump())
        if self._enable_cookie:
            max_age = REMEMBER_ME_MAX_AGE if dto.remember_me else SESSION_MAX_AGE
            self._cookies.attach(response, session.jwt, max_age=max_age)
        return response, 200

    def logout(self) -> tuple[Response, int]:
        self._logout_use_case.execute(self._token())
        audit_log(AuditAction.LOGOUT, ip_address=get_client_info().ip_address)

        response = jsonify(LogoutResponseDTO().model_dump())
        if self._enable_cookie:
            self._cookies.clear(response)
        logger.info("auth.logout: ok")
        return response, 200

    def me(self) -> tuple[Response, int]:
        user = self._current_user_use_case.execute(self._token())
        payload = CurrentUserDTO(user=UserDTO(**user.to_dict()))
        return jsonify(payload.model_dump()), 200

    def login_history(self) -> tuple[Response, int]:
        records = self._login_history_use_case.execute(self._token())
        payload = LoginHistoryDTO(data=[dict(record) for record in records])
        return jsonify(payload.model_dump()), 200

    @rate_limit(limit=5, window_seconds=60.0)
    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user, jwt = self._register_use_case.execute(dto.username, dto.password, dto.confirmed)
        audit_log(
            AuditAction.REGISTER,
            subject=user.id,
            ip_address=get_client_info().ip_address,
            details={"username": user.username},
        )
        payload = RegisterResponseDTO(user=UserDTO(**user.to_dict()), jwt=jwt)
        return jsonify(payload.model_dump(exclude_none=True)), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        bp.add_url_rule("/me", view_func=self.me, methods=["GET"])
        bp.add_url_rule("/login-history", view_func=self.login_history, methods=["GET"])
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        return bp
