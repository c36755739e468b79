from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class DevAdminLoginRequestDTO(BaseModel):
    username: str = Field(min_length=1, max_length=128)
    password: str = Field(min_length=1, max_length=256)


class DevAdminLoginResponseDTO(BaseModel):
    success: bool = True
    username: str
    role: str


class DevAdminSessionDTO(BaseModel):
    success: bool = True
    authenticated: bool = True
    username: str
    role: str
    expires_at: datetime


class DevAdminStatusDTO(BaseModel):
    success: bool = True
    configured: bool


class EnvironmentDTO(BaseModel):
    success: bool = True
    environment: str
    devadmin: bool


class SuccessDTO(BaseModel):
    success: bool = True
