from __future__ import annotations

import json

import httpx
import pytest
import respx

from attendance_backend.domain.users import (
    IdentityProviderRejectedError,
    IdentityProviderUnavailableError,
    RegistrationFailedError,
)
from attendance_backend.infrastructure.identity.strapi_client import StrapiClient

BASE_URL = "http://strapi.test"


@pytest.fixture()
def client() -> StrapiClient:
    return StrapiClient(BASE_URL + "/", timeout=2.0)


@respx.mock
def test_authenticate_returns_session(client: StrapiClient) -> None:
    route = respx.post(f"{BASE_URL}/api/auth/local").mock(
        return_value=httpx.Response(
            200, json={"jwt": "strapi.jwt", "user": {"id": 7, "username": "alice"}}
        )
    )

    session = client.authenticate("alice", "pw")

    assert session.jwt == "strapi.jwt"
    assert session.user.id == 7
    assert json.loads(route.calls.last.request.content) == {
        "identifier": "alice",
        "password": "pw",
    }


@respx.mock
def test_authenticate_rejection_carries_upstream_message(client: StrapiClient) -> None:
    respx.post(f"{BASE_URL}/api/auth/local").mock(
        return_value=httpx.Response(
            400, json={"error": {"status": 400, "message": "Invalid identifier or password"}}
        )
    )

    with pytest.raises(IdentityProviderRejectedError) as excinfo:
        client.authenticate("alice", "bad")

    assert excinfo.value.upstream_status == 400
    assert excinfo.value.message == "Invalid identifier or password"


@respx.mock
def test_upstream_server_error_is_unavailable_not_rejected(client: StrapiClient) -> None:
    respx.post(f"{BASE_URL}/api/auth/local").mock(
        return_value=httpx.Response(503, json={"error": {"message": "Service Unavailable"}})
    )

    with pytest.raises(IdentityProviderUnavailableError) as excinfo:
        client.authenticate("alice", "pw")

    assert excinfo.value.reason == "status_503"


@respx.mock
def test_network_error_is_unavailable(client: StrapiClient) -> None:
    respx.post(f"{BASE_URL}/api/auth/local").mock(side_effect=httpx.ConnectError("refused"))

    with pytest.raises(IdentityProviderUnavailableError) as excinfo:
        client.authenticate("alice", "pw")

    assert excinfo.value.code == "identity_provider_unavailable"
    assert excinfo.value.status == 502


@respx.mock
def test_current_user_sends_bearer_token(client: StrapiClient) -> None:
    route = respx.get(f"{BASE_URL}/api/users/me").mock(
        return_value=httpx.Response(200, json={"id": 7, "username": "alice", "email": "a@x.io"})
    )

    user = client.current_user("strapi.jwt")

    assert user.email == "a@x.io"
    assert route.calls.last.request.headers["Authorization"] == "Bearer strapi.jwt"


@respx.mock
def test_login_history_filters_by_user(client: StrapiClient) -> None:
    route = respx.get(f"{BASE_URL}/api/logins").mock(
        return_value=httpx.Response(200, json={"data": [{"id": 1}, {"id": 2}]})
    )

    records = client.login_history("strapi.jwt", 7, limit=10)

    assert [r["id"] for r in records] == [1, 2]
    params = route.calls.last.request.url.params
    assert params["filters[user][id][$eq]"] == "7"
    assert params["sort"] == "loginAttemptAt:desc"
    assert params["pagination[limit]"] == "10"


@respx.mock
def test_find_user_id_matches_username_or_email(client: StrapiClient) -> None:
    route = respx.get(f"{BASE_URL}/api/users").mock(
        return_value=httpx.Response(200, json=[{"id": 9, "username": "bob"}])
    )

    assert client.find_user_id("bob@example.com") == 9
    params = route.calls.last.request.url.params
    assert params["filters[$or][1][email][$eq]"] == "bob@example.com"


@respx.mock
def test_find_user_id_unknown(client: StrapiClient) -> None:
    respx.get(f"{BASE_URL}/api/users").mock(return_value=httpx.Response(200, json=[]))

    assert client.find_user_id("ghost") is None


@respx.mock
def test_register_falls_back_to_user_creation(client: StrapiClient) -> None:
    respx.post(f"{BASE_URL}/api/auth/local/register").mock(
        return_value=httpx.Response(400, json={"error": {"message": "Email is required"}})
    )
    create = respx.post(f"{BASE_URL}/api/users").mock(
        return_value=httpx.Response(201, json={"id": 11, "username": "carol"})
    )

    user, jwt = client.register("carol", "secret1")

    assert user.id == 11
    assert jwt is None
    assert json.loads(create.calls.last.request.content)["provider"] == "local"


@respx.mock
def test_register_failure_raises(client: StrapiClient) -> None:
    respx.post(f"{BASE_URL}/api/auth/local/register").mock(return_value=httpx.Response(400))
    respx.post(f"{BASE_URL}/api/users").mock(
        return_value=httpx.Response(403, json={"error": {"message": "Forbidden"}})
    )

    with pytest.raises(RegistrationFailedError):
        client.register("carol", "secret1")


@respx.mock
def test_create_login_record_wraps_data(client: StrapiClient) -> None:
    route = respx.post(f"{BASE_URL}/api/logins").mock(return_value=httpx.Response(200, json={}))

    client.create_login_record({"loginStatus": "success"})

    assert json.loads(route.calls.last.request.content) == {"data": {"loginStatus": "success"}}


@respx.mock
def test_update_login_record_raises_on_error(client: StrapiClient) -> None:
    respx.put(f"{BASE_URL}/api/logins/42").mock(return_value=httpx.Response(403))

    with pytest.raises(httpx.HTTPStatusError):
        client.update_login_record("strapi.jwt", 42, {"logoutAt": "x"})
