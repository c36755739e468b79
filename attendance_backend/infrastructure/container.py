# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from attendance_backend.application.services.credential_validator import CredentialValidator
from attendance_backend.application.services.password_hashing import AdaptivePasswordHasher
from attendance_backend.application.services.token_service import TokenService
from attendance_backend.application.use_cases.devadmin.login_devadmin import LoginDevAdminUseCase
from attendance_backend.application.use_cases.devadmin.verify_session import (
    VerifyDevAdminSessionUseCase,
)
from attendance_backend.application.use_cases.users.get_current_user import (
    GetCurrentUserUseCase,
    GetLoginHistoryUseCase,
)
from attendance_backend.application.use_cases.users.login_user import LoginUserUseCase
from attendance_backend.application.use_cases.users.logout_user import LogoutUserUseCase
from attendance_backend.application.use_cases.users.register_user import RegisterUserUseCase
from attendance_backend.domain.devadmin import CredentialRecord, TokenPolicy
from attendance_backend.infrastructure.audit import BackgroundAuditDispatcher, StrapiLoginAuditSink
from attendance_backend.infrastructure.auth.login_attempts import LoginAttemptsTracker
from attendance_backend.infrastructure.devadmin_middleware import DevAdminGuard
from attendance_backend.infrastructure.identity.strapi_client import StrapiClient
from attendance_backend.infrastructure.session_cookies import CookiePolicy, SessionCookieManager
from attendance_backend.interfaces.http.controllers.auth_controller import (
    SESSION_MAX_AGE,
    AuthController,
)
from attendance_backend.interfaces.http.controllers.devadmin_controller import DevAdminController
from attendance_backend.shared.config import AppConfig


class Container:
    def __init__(self, config: AppConfig) -> None:
        self.config = config

    # Devadmin

    @cached_property
    def password_hasher(self) -> AdaptivePasswordHasher:
        return AdaptivePasswordHasher(rounds=self.config.devadmin.bcrypt_rounds)

    @cached_property
    def credential_validator(self) -> CredentialValidator:
        devadmin = self.config.devadmin
        return CredentialValidator(
            CredentialRecord.from_values(devadmin.username, devadmin.password_hash),
            self.password_hasher,
        )

    @cached_property
    def token_service(self) -> TokenService:
        return TokenService(
            TokenPolicy(
                secret=self.config.devadmin.jwt_secret,
                lifetime=self.config.devadmin.jwt_expiry,
                production=self.config.is_production(),
            )
        )

    @cached_property
    def devadmin_cookies(self) -> SessionCookieManager:
        return SessionCookieManager(
            CookiePolicy(
                name=self.config.devadmin.cookie_name,
                max_age=self.token_service.lifetime_seconds,
                secure=self.config.cookies_secure(),
                samesite="Strict",
            )
        )

    @cached_property
    def login_attempts(self) -> LoginAttemptsTracker:
        return LoginAttemptsTracker()

    @cached_property
    def login_devadmin_use_case(self) -> LoginDevAdminUseCase:
        return LoginDevAdminUseCase(
            validator=self.credential_validator,
            tokens=self.token_service,
            attempts=self.login_attempts,
        )

    @cached_property
    def verify_devadmin_use_case(self) -> VerifyDevAdminSessionUseCase:
        return VerifyDevAdminSessionUseCase(tokens=self.token_service)

    @cached_property
    def devadmin_guard(self) -> DevAdminGuard:
        return DevAdminGuard(
            verify_use_case=self.verify_devadmin_use_case,
            cookies=self.devadmin_cookies,
        )

    @cached_property
    def devadmin_controller(self) -> DevAdminController:
        return DevAdminController(
            login_use_case=self.login_devadmin_use_case,
            guard=self.devadmin_guard,
            cookies=self.devadmin_cookies,
            is_configured=self.credential_validator.is_configured(),
        )

    # Identity provider users

    @cached_property
    def identity_provider(self) -> StrapiClient:
        identity = self.config.identity
        return StrapiClient(identity.base_url, timeout=identity.timeout)

    @cached_property
    def audit_client(self) -> StrapiClient:
        identity = self.config.identity
        return StrapiClient(identity.base_url, timeout=identity.audit_timeout)

    @cached_property
    def audit_dispatcher(self) -> BackgroundAuditDispatcher:
        sink = StrapiLoginAuditSink(self.audit_client, timeout=self.config.identity.audit_timeout)
        return BackgroundAuditDispatcher(sink)

    @cached_property
    def auth_cookies(self) -> SessionCookieManager:
        return SessionCookieManager(
            CookiePolicy(
                name=self.config.identity.cookie_name,
                max_age=SESSION_MAX_AGE,
                secure=self.config.cookies_secure(),
                samesite="Lax",
            )
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(identity=self.identity_provider, audit=self.audit_dispatcher)

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(identity=self.audit_client, audit=self.audit_dispatcher)

    @cached_property
    def current_user_use_case(self) -> GetCurrentUserUseCase:
        return GetCurrentUserUseCase(identity=self.identity_provider)

    @cached_property
    def login_history_use_case(self) -> GetLoginHistoryUseCase:
        return GetLoginHistoryUseCase(
            identity=self.identity_provider,
            current_user=self.current_user_use_case,
            limit=self.config.identity.history_limit,
        )

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(identity=self.identity_provider)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            login_use_case=self.login_user_use_case,
            logout_use_case=self.logout_user_use_case,
            current_user_use_case=self.current_user_use_case,
            login_history_use_case=self.login_history_use_case,
            register_use_case=self.register_user_use_case,
            cookies=self.auth_cookies,
            enable_cookie=self.config.identity.enable_cookie,
        )
