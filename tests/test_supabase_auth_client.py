from __future__ import annotations

import json

import httpx
import pytest

from saas_starter.domain.exceptions import UpstreamProviderError, ValidationError
from saas_starter.infrastructure.clients.supabase_auth_client import (
    ADMIN_USERS_PAGE_SIZE,
    SupabaseAuthClient,
    SupabaseAuthClientSettings,
)


def _make_client(handler) -> SupabaseAuthClient:
    return SupabaseAuthClient(
        SupabaseAuthClientSettings(
            url="https://project.supabase.co/",
            anon_key="anon-key",
            service_role_key="service-key",
            timeout_seconds=5,
        ),
        transport=httpx.MockTransport(handler),
    )


def _session_payload(**overrides) -> dict:
    payload = {
        "access_token": "access-1",
        "refresh_token": "refresh-1",
        "expires_in": 3600,
        "expires_at": 1_700_003_600,
        "user": {"id": "user-1", "email": "ada@example.com"},
    }
    payload.update(overrides)
    return payload


def test_sign_in_maps_session_and_uses_anon_key():
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=_session_payload())

    session = _make_client(handler).sign_in(email="ada@example.com", password="secret-pass")

    assert session.user_id == "user-1"
    assert session.access_token == "access-1"
    assert session.expires_at == 1_700_003_600
    request = requests[0]
    assert request.url.path == "/auth/v1/token"
    assert request.url.params["grant_type"] == "password"
    assert request.headers["apikey"] == "anon-key"
    assert json.loads(request.content) == {"email": "ada@example.com", "password": "secret-pass"}


def test_refresh_computes_missing_expires_at(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(
        "saas_starter.infrastructure.clients.supabase_auth_client.time.time",
        lambda: 1_700_000_000.5,
    )

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["grant_type"] == "refresh_token"
        payload = _session_payload(access_token="access-2")
        payload.pop("expires_at")
        return httpx.Response(200, json=payload)

    session = _make_client(handler).refresh_session(refresh_token="refresh-1")

    assert session.access_token == "access-2"
    assert session.expires_at == 1_700_003_600


def test_sign_in_rejected_credentials_is_validation_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": "invalid_grant"})

    with pytest.raises(ValidationError) as exc_info:
        _make_client(handler).sign_in(email="ada@example.com", password="wrong-pass")

    assert exc_info.value.message == "Invalid email or password"
    assert exc_info.value.metadata["status_code"] == 400


def test_server_error_is_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    with pytest.raises(UpstreamProviderError) as exc_info:
        _make_client(handler).sign_in(email="ada@example.com", password="secret-pass")

    assert exc_info.value.metadata["status_code"] == 503


def test_network_error_is_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamProviderError):
        _make_client(handler).verify_access_token(access_token="access-1")


def test_verify_access_token_sends_bearer():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "user-1"})

    _make_client(handler).verify_access_token(access_token="access-1")

    assert seen[0].url.path == "/auth/v1/user"
    assert seen[0].headers["Authorization"] == "Bearer access-1"


def test_create_and_delete_account_use_service_key():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.method == "POST":
            return httpx.Response(200, json={"id": "user-1", "created_at": "2024-01-01T00:00:00Z"})
        return httpx.Response(204)

    client = _make_client(handler)
    account = client.create_account(email="ada@example.com", password="secret-pass")
    client.delete_account(user_id="user-1")

    assert account.id == "user-1"
    assert account.created_at.year == 2024
    assert json.loads(seen[0].content)["email_confirm"] is True
    assert seen[1].method == "DELETE"
    assert seen[1].url.path == "/auth/v1/admin/users/user-1"
    assert all(request.headers["apikey"] == "service-key" for request in seen)


def test_find_user_id_by_email_pages_through_users():
    pages = {
        "1": [{"id": f"other-{i}", "email": f"user{i}@example.com"} for i in range(ADMIN_USERS_PAGE_SIZE)],
        "2": [{"id": "user-1", "email": "Ada@Example.com"}],
    }

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"users": pages.get(request.url.params["page"], [])})

    client = _make_client(handler)

    assert client.find_user_id_by_email(email="ada@example.com") == "user-1"
    assert client.find_user_id_by_email(email="nobody@example.com") is None


@pytest.mark.parametrize(
    "body",
    [
        [],
        "session",
        {"access_token": "a", "user": {"id": "u"}, "expires_in": "soon"},
        {"access_token": "a", "user": {"id": "u"}, "expires_at": {"at": 1}},
        {"access_token": "a", "user": "u"},
        {"user": {"id": "u"}},
    ],
)
def test_malformed_session_body_is_upstream_error(body):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    with pytest.raises(UpstreamProviderError):
        _make_client(handler).refresh_session(refresh_token="refresh-1")


def test_malformed_created_at_is_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"id": "user-1", "created_at": "yesterday"})

    with pytest.raises(UpstreamProviderError):
        _make_client(handler).create_account(email="ada@example.com", password="secret-pass")


def test_malformed_admin_user_list_is_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"users": {"id": "user-1"}})

    with pytest.raises(UpstreamProviderError):
        _make_client(handler).find_user_id_by_email(email="ada@example.com")
