from __future__ import annotations

from typing import cast
from unittest.mock import MagicMock

import pytest
from flask import Flask

from attendance_backend.application.use_cases.users.get_current_user import (
    GetCurrentUserUseCase,
    GetLoginHistoryUseCase,
)
from attendance_backend.application.use_cases.users.login_user import LoginUserUseCase
from attendance_backend.application.use_cases.users.logout_user import LogoutUserUseCase
from attendance_backend.application.use_cases.users.register_user import RegisterUserUseCase
from attendance_backend.domain.users import (
    AuthenticationFailedError,
    AuthSession,
    IdentityProviderRejectedError,
    IdentityUser,
)
from attendance_backend.infrastructure.session_cookies import CookiePolicy, SessionCookieManager
from attendance_backend.interfaces.http.controllers.auth_controller import AuthController
from attendance_backend.shared.middleware.error_handler import configure_error_handling

ALICE = IdentityUser(id=7, username="alice", email="alice@example.com", role={"name": "Staff"})


@pytest.fixture()
def flask_app() -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)
    return app


@pytest.fixture()
def identity() -> MagicMock:
    identity = MagicMock()
    identity.current_user.return_value = ALICE
    identity.login_history.return_value = [{"id": 1, "loginStatus": "success"}]
    return identity


def _controller(identity: MagicMock, *, login_use_case=None, logout_use_case=None, enable_cookie=True):
    current_user = GetCurrentUserUseCase(identity=identity)
    return AuthController(
        login_use_case=login_use_case or MagicMock(),
        logout_use_case=logout_use_case or MagicMock(),
        current_user_use_case=current_user,
        login_history_use_case=GetLoginHistoryUseCase(identity=identity, current_user=current_user),
        register_use_case=RegisterUserUseCase(identity=identity),
        cookies=SessionCookieManager(
            CookiePolicy(name="jwt", max_age=86400, secure=False, samesite="Lax")
        ),
        enable_cookie=enable_cookie,
    )


def test_login_sets_session_cookie(flask_app: Flask, identity: MagicMock) -> None:
    login = MagicMock()
    login.execute.return_value = AuthSession(jwt="strapi.jwt.value", user=ALICE)
    flask_app.register_blueprint(_controller(identity, login_use_case=login).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/login", json={"identifier": "alice", "password": "pw"}
        )

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["success"] is True
    assert payload["jwt"] == "strapi.jwt.value"
    assert payload["user"]["username"] == "alice"
    header = response.headers["Set-Cookie"]
    assert header.startswith("jwt=strapi.jwt.value")
    assert "Max-Age=86400" in header
    assert "SameSite=Lax" in header
    assert login.execute.call_args.args[:3] == ("alice", "pw", False)


def test_remember_me_only_extends_cookie(flask_app: Flask, identity: MagicMock) -> None:
    login = MagicMock()
    login.execute.return_value = AuthSession(jwt="strapi.jwt.value", user=ALICE)
    flask_app.register_blueprint(_controller(identity, login_use_case=login).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/login",
            json={"identifier": "alice", "password": "pw", "rememberMe": True},
        )

    assert "Max-Age=2592000" in response.headers["Set-Cookie"]
    assert response.get_json()["jwt"] == "strapi.jwt.value"


def test_login_without_cookie_mode(flask_app: Flask, identity: MagicMock) -> None:
    login = MagicMock()
    login.execute.return_value = AuthSession(jwt="strapi.jwt.value", user=ALICE)
    controller = _controller(identity, login_use_case=login, enable_cookie=False)
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/auth/login", json={"identifier": "alice", "password": "pw"})

    assert response.status_code == 200
    assert "Set-Cookie" not in response.headers


def test_login_failure_is_generic(flask_app: Flask, identity: MagicMock) -> None:
    login = MagicMock()
    login.execute.side_effect = AuthenticationFailedError()
    flask_app.register_blueprint(_controller(identity, login_use_case=login).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/auth/login", json={"identifier": "alice", "password": "x"})

    assert response.status_code == 401
    assert response.get_json() == {"success": False, "error": "authentication_failed"}


def test_login_invalid_payload_returns_422(flask_app: Flask, identity: MagicMock) -> None:
    flask_app.register_blueprint(_controller(identity).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/auth/login", json={"identifier": "   ", "password": "pw"})

    assert response.status_code == 422
    assert "identifier" in response.get_json()["context"]["fields"]


def test_me_prefers_cookie_over_bearer(flask_app: Flask, identity: MagicMock) -> None:
    flask_app.register_blueprint(_controller(identity).as_blueprint())

    with flask_app.test_client() as client:
        client.set_cookie("jwt", "cookie-token")
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer header-token"})

    assert response.status_code == 200
    assert response.get_json()["user"]["id"] == 7
    identity.current_user.assert_called_once_with("cookie-token")


def test_me_accepts_bearer_header(flask_app: Flask, identity: MagicMock) -> None:
    flask_app.register_blueprint(_controller(identity).as_blueprint())

    with flask_app.test_client() as client:
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer header-token"})

    assert response.status_code == 200
    identity.current_user.assert_called_once_with("header-token")


def test_me_without_token_is_unauthorized(flask_app: Flask, identity: MagicMock) -> None:
    flask_app.register_blueprint(_controller(identity).as_blueprint())

    with flask_app.test_client() as client:
        response = client.get("/api/auth/me")

    assert response.status_code == 401
    identity.current_user.assert_not_called()


def test_me_with_rejected_token_is_unauthorized(flask_app: Flask, identity: MagicMock) -> None:
    identity.current_user.side_effect = IdentityProviderRejectedError(401, "Invalid token")
    flask_app.register_blueprint(_controller(identity).as_blueprint())

    with flask_app.test_client() as client:
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer stale"})

    assert response.status_code == 401
    assert response.get_json()["error"] == "authentication_failed"


def test_login_history_returns_records(flask_app: Flask, identity: MagicMock) -> None:
    flask_app.register_blueprint(_controller(identity).as_blueprint())

    with flask_app.test_client() as client:
        response = client.get("/api/auth/login-history", headers={"Authorization": "Bearer t"})

    assert response.status_code == 200
    assert response.get_json()["data"] == [{"id": 1, "loginStatus": "success"}]
    identity.login_history.assert_called_once_with("t", 7, 50)


def test_logout_clears_cookie_and_stamps_session(flask_app: Flask, identity: MagicMock) -> None:
    logout = MagicMock()
    flask_app.register_blueprint(
        _controller(identity, logout_use_case=cast(LogoutUserUseCase, logout)).as_blueprint()
    )

    with flask_app.test_client() as client:
        client.set_cookie("jwt", "cookie-token")
        response = client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.get_json()["message"] == "Logged out successfully"
    assert response.headers["Set-Cookie"].startswith("jwt=;")
    logout.execute.assert_called_once_with("cookie-token")


def test_register_existing_username_conflicts(flask_app: Flask, identity: MagicMock) -> None:
    identity.username_exists.return_value = True
    flask_app.register_blueprint(_controller(identity).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/register", json={"username": "alice", "password": "secret1"}
        )

    assert response.status_code == 409
    assert response.get_json()["error"] == "username_taken"
    identity.register.assert_not_called()


def test_register_creates_user(flask_app: Flask, identity: MagicMock) -> None:
    identity.username_exists.return_value = False
    identity.register.return_value = (ALICE, None)
    flask_app.register_blueprint(_controller(identity).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/register", json={"username": "alice", "password": "secret1"}
        )

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["user"]["username"] == "alice"
    assert "jwt" not in payload
    identity.register.assert_called_once_with("alice", "secret1", True)


def test_controller_accepts_real_login_use_case(flask_app: Flask, identity: MagicMock) -> None:
    identity.authenticate.return_value = AuthSession(jwt="j", user=ALICE)
    dispatcher = MagicMock()
    login = LoginUserUseCase(identity=identity, audit=dispatcher)
    flask_app.register_blueprint(_controller(identity, login_use_case=login).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/auth/login", json={"identifier": "alice", "password": "pw"})

    assert response.status_code == 200
    dispatcher.submit.assert_called_once()
