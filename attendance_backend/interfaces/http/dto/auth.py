from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LoginRequestDTO(BaseModel):
    identifier: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=256)
    remember_me: bool = Field(False, alias="rememberMe")

    model_config = ConfigDict(validate_by_name=True)

    @field_validator("identifier")
    @classmethod
    def strip_identifier(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("identifier must not be blank")
        return value


class RegisterRequestDTO(BaseModel):
    username: str = Field(min_length=3, max_length=64)
    password: str = Field(min_length=6, max_length=256)
    confirmed: bool = True

    @field_validator("username")
    @classmethod
    def strip_username(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 3:
            raise ValueError("username must have at least 3 characters")
        return value


class UserDTO(BaseModel):
    id: int
    username: str
    email: str | None = None
    role: Any = None


class LoginResponseDTO(BaseModel):
    success: bool = True
    jwt: str
    user: UserDTO


class CurrentUserDTO(BaseModel):
    success: bool = True
    user: UserDTO


class RegisterResponseDTO(BaseModel):
    success: bool = True
    user: UserDTO
    jwt: str | None = None


class LoginHistoryDTO(BaseModel):
    success: bool = True
    data: list[dict[str, Any]]


class LogoutResponseDTO(BaseModel):
    success: bool = True
    message: str = "Logged out successfully"
