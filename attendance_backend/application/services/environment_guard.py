# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Sheet environment selection: only devadmin sessions may target ``dev``."""

from __future__ import annotations

from enum import Enum

from attendance_backend.shared.logging import logger


class SheetEnvironment(str, Enum):
    PROD = "prod"
    DEV = "dev"


def resolve_environment(requested: str | None, is_devadmin: bool, context: str = "api") -> SheetEnvironment:
    try:
        wanted = SheetEnvironment((requested or SheetEnvironment.PROD.value).lower())
    except ValueError:
        logger.warning(f"env_guard: {context} unknown environment {requested!r}, using prod")
        return SheetEnvironment.PROD

    if not is_devadmin and wanted is SheetEnvironment.DEV:
        logger.warning(f"env_guard: {context} non-devadmin requested dev, forcing prod")
        return SheetEnvironment.PROD

    return wanted


__all__ = ["SheetEnvironment", "resolve_environment"]
