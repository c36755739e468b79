# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import re
import sys
from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

FALLBACK_JWT_SECRET = "fallback-secret-please-set-env-var"

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration(value: str | int | float | timedelta) -> timedelta:
    if isinstance(value, timedelta):
        return value
    if isinstance(value, (int, float)):
        return timedelta(seconds=value)
    match = _DURATION_RE.match(value)
    if not match:
        raise ValueError(f"invalid duration {value!r}, expected e.g. 24h, 30m, 7d or seconds")
    amount, unit = match.groups()
    return timedelta(seconds=int(amount) * _DURATION_UNITS[unit.lower()])


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


_SETTINGS = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    validate_by_name=True,
)


class DevAdminConfig(BaseSettings):
    username: str | None = Field(None, alias="DEVADMIN_USERNAME")
    password_hash: str | None = Field(None, alias="DEVADMIN_PASSWORD_HASH")
    jwt_secret: str | None = Field(None, alias="JWT_SECRET")
    jwt_expiry: timedelta = Field(timedelta(hours=24), alias="JWT_EXPIRY")
    cookie_name: str = Field("devadmin_token", alias="DEVADMIN_COOKIE_NAME")
    bcrypt_rounds: int = Field(10, ge=10, le=20, alias="BCRYPT_ROUNDS")

    model_config = _SETTINGS

    @field_validator("username", "password_hash", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: str | None) -> str | None:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("jwt_secret", mode="before")
    @classmethod
    def _reject_fallback_secret(cls, value: str | None) -> str | None:
        if value is None or not str(value).strip() or value == FALLBACK_JWT_SECRET:
            return None
        return value

    @field_validator("jwt_expiry", mode="before")
    @classmethod
    def _parse_expiry(cls, value: str | int | timedelta) -> timedelta:
        expiry = parse_duration(value)
        if expiry.total_seconds() <= 0:
            raise ValueError("JWT_EXPIRY must be positive")
        return expiry

    def is_configured(self) -> bool:
        return bool(self.username and self.password_hash)


class IdentityProviderConfig(BaseSettings):
    base_url: str = Field("http://localhost:1337", alias="STRAPI_URL")
    timeout: float = Field(10.0, ge=0.1, alias="STRAPI_TIMEOUT")
    audit_timeout: float = Field(3.0, ge=0.1, le=30.0, alias="AUDIT_TIMEOUT")
    cookie_name: str = Field("jwt", alias="AUTH_COOKIE_NAME")
    enable_cookie: bool = Field(True, alias="AUTH_ENABLE_COOKIE")
    history_limit: int = Field(50, ge=1, le=500, alias="LOGIN_HISTORY_LIMIT")

    model_config = _SETTINGS

    @field_validator("base_url", mode="after")
    @classmethod
    def _strip_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("enable_cookie", mode="before")
    @classmethod
    def _parse_enable_cookie(cls, value: str | bool) -> bool:
        return _parse_bool(value)


class SecurityConfig(BaseSettings):
    # Cookie security
    cookie_secure: bool = Field(False, alias="COOKIE_SECURE")

    # CORS
    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, alias="RL_WINDOW")

    # Reverse proxies whose X-Forwarded-* headers are trusted (0 = none)
    trusted_proxy_count: int = Field(0, ge=0, le=5, alias="TRUSTED_PROXY_COUNT")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _SETTINGS

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("cookie_secure", "enable_rate_limit", "enable_hsts", mode="before")
    @classmethod
    def _parse_flags(cls, value: str | bool) -> bool:
        return _parse_bool(value)


def _devadmin_config_factory() -> DevAdminConfig:
    return DevAdminConfig()  # type: ignore[call-arg]


def _identity_config_factory() -> IdentityProviderConfig:
    return IdentityProviderConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")

    devadmin: DevAdminConfig = Field(default_factory=_devadmin_config_factory)
    identity: IdentityProviderConfig = Field(default_factory=_identity_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_by_name=True,
        validate_assignment=True,
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        warnings = []
        if self.devadmin.jwt_secret is None:
            warnings.append("❌ JWT_SECRET is not set: devadmin tokens will NOT be issued")
        elif len(self.devadmin.jwt_secret) < 32:
            warnings.append("⚠️  JWT_SECRET is shorter than 32 characters")
        if not self.devadmin.is_configured():
            warnings.append(
                "⚠️  DEVADMIN_USERNAME / DEVADMIN_PASSWORD_HASH not set: devadmin login disabled"
            )
        if "*" in self.security.allowed_origins:
            warnings.append("⚠️  CORS allows wildcard (*) origins")
        if not self.security.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)
            print(
                "   Generate a secret with: python -c \"import secrets; print(secrets.token_urlsafe(48))\"\n",
                file=sys.stderr,
            )

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    def cookies_secure(self) -> bool:
        return self.is_production() or self.security.cookie_secure


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = [
    "AppConfig",
    "DevAdminConfig",
    "FALLBACK_JWT_SECRET",
    "IdentityProviderConfig",
    "SecurityConfig",
    "load_config",
    "parse_duration",
]
