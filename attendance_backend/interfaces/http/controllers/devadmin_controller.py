# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, g, jsonify, request
from pydantic import ValidationError

from attendance_backend.application.services.environment_guard import resolve_environment
from attendance_backend.application.use_cases.devadmin.login_devadmin import LoginDevAdminUseCase
from attendance_backend.domain.devadmin import (
    DEVADMIN_ROLE,
    InvalidCredentialsError,
    SessionClaims,
    TooManyAttemptsError,
)
from attendance_backend.infrastructure.audit import AuditAction, audit_log
from attendance_backend.infrastructure.devadmin_middleware import DevAdminGuard, require_devadmin
from attendance_backend.infrastructure.session_cookies import SessionCookieManager
from attendance_backend.interfaces.http.dto.devadmin import (
    DevAdminLoginRequestDTO,
    DevAdminLoginResponseDTO,
    DevAdminSessionDTO,
    DevAdminStatusDTO,
    EnvironmentDTO,
    SuccessDTO,
)
from attendance_backend.interfaces.http.request_context import get_client_ip
from attendance_backend.shared.errors.validation import raise_validation_error
from attendance_backend.shared.logging import logger
from attendance_backend.shared.middleware.rate_limit import rate_limit


class DevAdminController:
    def __init__(
        self,
        *,
        login_use_case: LoginDevAdminUseCase,
        guard: DevAdminGuard,
        cookies: SessionCookieManager,
        is_configured: bool,
    ) -> None:
        self._login_use_case = login_use_case
        self._guard = guard
        self._cookies = cookies
        self._is_configured = is_configured

    @rate_limit(limit=10, window_seconds=60.0)
    def login(self) -> tuple[Response, int]:
        try:
            dto = DevAdminLoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = get_client_ip()

        try:
            token = self._login_use_case.execute(dto.username, dto.password, ip_address or "unknown")
        except TooManyAttemptsError:
            audit_log(
                AuditAction.DEVADMIN_LOGIN_LOCKED,
                subject=dto.username,
                ip_address=ip_address,
                success=False,
            )
            raise
        except InvalidCredentialsError:
            audit_log(
                AuditAction.DEVADMIN_LOGIN_FAILED,
                subject=dto.username,
                ip_address=ip_address,
                success=False,
            )
            raise
        except Exception as exc:
            logger.exception("devadmin.login: unexpected error")
            raise InvalidCredentialsError() from exc

        audit_log(AuditAction.DEVADMIN_LOGIN_SUCCESS, subject=dto.username, ip_address=ip_address)

        payload = DevAdminLoginResponseDTO(username=dto.username, role=DEVADMIN_ROLE)
        response = jsonify(payload.model_dump())
        self._cookies.attach(response, token)
        return response, 200

    def logout(self) -> tuple[Response, int]:
        audit_log(AuditAction.DEVADMIN_LOGOUT, ip_address=get_client_ip())
        response = jsonify(SuccessDTO().model_dump())
        self._cookies.clear(response)
        return response, 200

    @require_devadmin
    def verify(self) -> tuple[Response, int]:
        claims: SessionClaims = g.devadmin
        payload = DevAdminSessionDTO(
            username=claims.subject,
            role=claims.role,
            expires_at=claims.expires_at,
        )
        return jsonify(payload.model_dump(mode="json")), 200

    def status(self) -> tuple[Response, int]:
        return jsonify(DevAdminStatusDTO(configured=self._is_configured).model_dump()), 200

    def environment(self) -> tuple[Response, int]:
        is_devadmin = self._guard.is_devadmin()
        requested = request.args.get("requested") or request.args.get("env")
        resolved = resolve_environment(requested, is_devadmin, context="environment")
        payload = EnvironmentDTO(environment=resolved.value, devadmin=is_devadmin)
        return jsonify(payload.model_dump()), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("devadmin", __name__, url_prefix="/api/devadmin")
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        bp.add_url_rule("/verify", view_func=self.verify, methods=["GET"])
        bp.add_url_rule("/status", view_func=self.status, methods=["GET"])
        bp.add_url_rule("/environment", view_func=self.environment, methods=["GET"])
        return bp
