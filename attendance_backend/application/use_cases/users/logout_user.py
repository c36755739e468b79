"""Use-case for ending an identity-provider session."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from attendance_backend.domain.users import IdentityProvider
from attendance_backend.infrastructure.audit import BackgroundAuditDispatcher
from attendance_backend.shared.logging import logger


def _login_time(record: Mapping[str, Any]) -> datetime | None:
    attributes = record.get("attributes") or record
    raw = attributes.get("loginAttemptAt")
    if not raw:
        return None
    try:
        value = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError:
        return None
    return value if value.tzinfo else value.replace(tzinfo=UTC)


class LogoutUserUseCase:
    def __init__(
        self,
        *,
        identity: IdentityProvider,
        audit: BackgroundAuditDispatcher,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._identity = identity
        self._audit = audit
        self._clock = clock

    def execute(self, token: str | None) -> None:
        if token:
            self._audit.run_detached("logout_stamp", self.stamp_logout, token, self._clock())

    def stamp_logout(self, token: str, logout_at: datetime) -> None:
        user = self._identity.current_user(token)
        last_login = self._identity.latest_successful_login(token, user.id)
        if not last_login:
            logger.debug(f"auth.logout: no successful login record for user_id={user.id}")
            return

        login_at = _login_time(last_login)
        data: dict[str, Any] = {"logoutAt": logout_at.astimezone(UTC).isoformat()}
        if login_at is not None:
            data["sessionDuration"] = int((logout_at - login_at).total_seconds() * 1000)

        self._identity.update_login_record(token, int(last_login["id"]), data)
        logger.info(f"auth.logout: stamped login record id={last_login['id']} user_id={user.id}")
