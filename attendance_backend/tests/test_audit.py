from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest

from attendance_backend.domain.users import (
    AuditWriteFailedError,
    ClientInfo,
    LoginAuditRecord,
    LoginStatus,
)
from attendance_backend.infrastructure.audit import (
    AuditAction,
    BackgroundAuditDispatcher,
    StrapiLoginAuditSink,
    _sanitize_details,
    audit_log,
    login_record_payload,
)

CLIENT = ClientInfo(ip_address="203.0.113.5", user_agent="Mozilla/5.0", platform="Android")
WHEN = datetime(2025, 3, 1, 9, 0, tzinfo=UTC)


def test_failed_login_payload() -> None:
    record = LoginAuditRecord(
        status=LoginStatus.FAILED, timestamp=WHEN, client=CLIENT, identifier="alice"
    )

    payload = login_record_payload(record, None)

    assert payload == {
        "user": None,
        "loginStatus": "failed",
        "loginAttemptAt": "2025-03-01T09:00:00+00:00",
        "ipAddress": "203.0.113.5",
        "userAgent": "Mozilla/5.0",
        "deviceInfo": {"browser": "Mozilla/5.0", "platform": "Android"},
        "failureReason": "Invalid credentials",
    }


def test_successful_login_payload_carries_remember_me() -> None:
    record = LoginAuditRecord(
        status=LoginStatus.SUCCESS,
        timestamp=WHEN,
        client=CLIENT,
        user_reference=7,
        remember_me=True,
    )

    payload = login_record_payload(record, 7)

    assert payload["user"] == 7
    assert payload["rememberMe"] is True
    assert "failureReason" not in payload


def test_sink_looks_up_user_for_failed_login() -> None:
    client = MagicMock()
    client.find_user_id.return_value = 9
    record = LoginAuditRecord(
        status=LoginStatus.FAILED, timestamp=WHEN, client=CLIENT, identifier="bob"
    )

    StrapiLoginAuditSink(client, timeout=3.0).write(record)

    client.find_user_id.assert_called_once_with("bob", timeout=3.0)
    assert client.create_login_record.call_args.args[0]["user"] == 9


def test_sink_shares_one_deadline_between_lookup_and_write() -> None:
    now = [50.0]

    def slow_lookup(identifier: str, *, timeout: float) -> int:
        now[0] += 2.0
        return 9

    client = MagicMock()
    client.find_user_id.side_effect = slow_lookup
    record = LoginAuditRecord(
        status=LoginStatus.FAILED, timestamp=WHEN, client=CLIENT, identifier="bob"
    )

    StrapiLoginAuditSink(client, timeout=3.0, clock=lambda: now[0]).write(record)

    assert client.create_login_record.call_args.kwargs["timeout"] == pytest.approx(1.0)


def test_sink_skips_write_once_deadline_is_spent() -> None:
    now = [50.0]

    def slow_lookup(identifier: str, *, timeout: float) -> int:
        now[0] += 3.5
        return 9

    client = MagicMock()
    client.find_user_id.side_effect = slow_lookup
    record = LoginAuditRecord(
        status=LoginStatus.FAILED, timestamp=WHEN, client=CLIENT, identifier="bob"
    )

    with pytest.raises(AuditWriteFailedError) as excinfo:
        StrapiLoginAuditSink(client, timeout=3.0, clock=lambda: now[0]).write(record)

    assert excinfo.value.reason == "deadline_exceeded"
    client.create_login_record.assert_not_called()


def test_sink_wraps_write_errors() -> None:
    client = MagicMock()
    client.create_login_record.side_effect = RuntimeError("boom")
    record = LoginAuditRecord(
        status=LoginStatus.SUCCESS, timestamp=WHEN, client=CLIENT, user_reference=7
    )

    with pytest.raises(AuditWriteFailedError) as excinfo:
        StrapiLoginAuditSink(client).write(record)

    assert excinfo.value.reason == "RuntimeError"


def test_dispatcher_swallows_task_errors() -> None:
    def explode() -> None:
        raise RuntimeError("boom")

    thread = BackgroundAuditDispatcher(MagicMock()).run_detached("explode", explode)
    thread.join(timeout=5)

    assert thread.daemon is True
    assert not thread.is_alive()


def test_dispatcher_submits_to_sink() -> None:
    sink = MagicMock()
    record = LoginAuditRecord(status=LoginStatus.SUCCESS, timestamp=WHEN, client=CLIENT)

    BackgroundAuditDispatcher(sink).submit(record).join(timeout=5)

    sink.write.assert_called_once_with(record)


def test_audit_details_are_redacted() -> None:
    details = _sanitize_details({"password": "pw", "jwt": "x", "username": "alice"})

    assert details == {"password": "***REDACTED***", "jwt": "***REDACTED***", "username": "alice"}


def test_audit_log_accepts_failures() -> None:
    audit_log(AuditAction.DEVADMIN_LOGIN_FAILED, subject="root", ip_address="1.2.3.4", success=False)
