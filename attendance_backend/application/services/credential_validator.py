# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hmac

from attendance_backend.domain.devadmin import CredentialRecord, PasswordHasher
from attendance_backend.shared.logging import logger


class CredentialValidator:
    """Checks a devadmin username/password against the configured reference.

    The password hash is compared even when the username is wrong, so both
    failure paths cost one hash comparison and return the same ``False``.
    Which factor failed is only written to the log.
    """

    def __init__(self, reference: CredentialRecord | None, hasher: PasswordHasher) -> None:
        self._reference = reference
        self._hasher = hasher

    def is_configured(self) -> bool:
        return bool(
            self._reference and self._reference.username and self._reference.password_hash
        )

    def validate(self, username: str, password: str) -> bool:
        reference = self._reference
        if reference is None or not reference.username or not reference.password_hash:
            logger.error(
                "devadmin.validate: DEVADMIN_USERNAME / DEVADMIN_PASSWORD_HASH not configured, "
                "rejecting all devadmin logins"
            )
            return False

        try:
            username_ok = hmac.compare_digest(
                username.encode("utf-8"), reference.username.encode("utf-8")
            )
            password_ok = self._hasher.verify(password, reference.password_hash)
        except Exception as exc:
            logger.error(
                f"devadmin.validate: error while checking credentials: {type(exc).__name__}"
            )
            return False

        if not username_ok:
            logger.warning(f"devadmin.validate: failed (unknown username) username='{username}'")
            return False
        if not password_ok:
            logger.warning(f"devadmin.validate: failed (wrong password) username='{username}'")
            return False

        logger.info(f"devadmin.validate: ok username='{username}'")
        return True
