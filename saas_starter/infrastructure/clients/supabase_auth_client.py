from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import httpx

from saas_starter.application.ports.identity_provider_port import IdentityProviderPort
from saas_starter.domain.entities.user import AuthAccount, AuthSession
from saas_starter.domain.exceptions import UpstreamProviderError, ValidationError


logger = logging.getLogger(__name__)

TAG = "supabase-auth-client"

ADMIN_USERS_PAGE_SIZE = 200


@dataclass(frozen=True)
class SupabaseAuthClientSettings:
    url: str
    anon_key: str
    service_role_key: str
    timeout_seconds: float


class SupabaseAuthClient(IdentityProviderPort):
    """GoTrue REST adapter.

    Admin endpoints are called with the service role key, user endpoints with
    the anon key. ``transport`` is only set by tests.
    """

    def __init__(
        self,
        settings: SupabaseAuthClientSettings,
        *,
        transport: httpx.BaseTransport | None = None,
    ):
        self._settings = settings
        self._base_url = settings.url.rstrip("/")
        self._transport = transport

    def create_account(self, *, email: str, password: str) -> AuthAccount:
        payload = self._request(
            "POST",
            "/auth/v1/admin/users",
            key=self._settings.service_role_key,
            json={"email": email, "password": password, "email_confirm": True},
            error_message="Unable to create identity account",
            metadata={"email": email},
        )
        account_id = payload.get("id")
        if not account_id:
            raise UpstreamProviderError("Identity account id is missing", metadata={"email": email}, tag=TAG)
        return AuthAccount(id=str(account_id), created_at=_parse_datetime(payload.get("created_at")))

    def sign_in(self, *, email: str, password: str) -> AuthSession:
        payload = self._request(
            "POST",
            "/auth/v1/token",
            key=self._settings.anon_key,
            params={"grant_type": "password"},
            json={"email": email, "password": password},
            error_message="Unable to sign in",
            metadata={"email": email},
            rejected_message="Invalid email or password",
        )
        return _map_session(payload)

    def refresh_session(self, *, refresh_token: str) -> AuthSession:
        payload = self._request(
            "POST",
            "/auth/v1/token",
            key=self._settings.anon_key,
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
            error_message="Unable to refresh session",
        )
        return _map_session(payload)

    def verify_access_token(self, *, access_token: str) -> None:
        self._request(
            "GET",
            "/auth/v1/user",
            key=self._settings.anon_key,
            bearer=access_token,
            error_message="Access token was rejected",
        )

    def delete_account(self, *, user_id: str) -> None:
        self._request(
            "DELETE",
            f"/auth/v1/admin/users/{user_id}",
            key=self._settings.service_role_key,
            error_message="Unable to delete identity account",
            metadata={"user_id": user_id},
        )
        logger.info("supabase_auth: account_deleted user_id=%s", user_id)

    def find_user_id_by_email(self, *, email: str) -> str | None:
        email_l = email.lower()
        page = 1
        while True:
            payload = self._request(
                "GET",
                "/auth/v1/admin/users",
                key=self._settings.service_role_key,
                params={"page": page, "per_page": ADMIN_USERS_PAGE_SIZE},
                error_message="Unable to list identity accounts",
                metadata={"email": email},
            )
            users = payload.get("users") or []
            if not isinstance(users, list):
                raise UpstreamProviderError(
                    "Unable to list identity accounts",
                    metadata={"email": email},
                    tag=TAG,
                )
            for user in users:
                if isinstance(user, dict) and str(user.get("email", "")).lower() == email_l:
                    return str(user["id"])
            if len(users) < ADMIN_USERS_PAGE_SIZE:
                return None
            page += 1

    def _request(
        self,
        method: str,
        path: str,
        *,
        key: str,
        error_message: str,
        bearer: str | None = None,
        params: dict | None = None,
        json: dict | None = None,
        metadata: dict | None = None,
        rejected_message: str | None = None,
    ) -> dict[str, Any]:
        headers = {
            "apikey": key,
            "Authorization": f"Bearer {bearer or key}",
        }
        try:
            with httpx.Client(
                base_url=self._base_url,
                timeout=self._settings.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = client.request(method, path, headers=headers, params=params, json=json)
        except httpx.HTTPError as exc:
            raise UpstreamProviderError(error_message, cause=exc, metadata=metadata, tag=TAG) from exc

        if response.is_error:
            details = dict(metadata or {})
            details["status_code"] = response.status_code
            if rejected_message and response.status_code in (400, 401, 422):
                raise ValidationError(rejected_message, metadata=details, tag=TAG)
            raise UpstreamProviderError(error_message, metadata=details, tag=TAG)

        if not response.content:
            return {}
        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamProviderError(error_message, cause=exc, metadata=metadata, tag=TAG) from exc
        if not isinstance(payload, dict):
            raise UpstreamProviderError(
                error_message,
                metadata={**(metadata or {}), "body_type": type(payload).__name__},
                tag=TAG,
            )
        return payload


def _map_session(payload: dict[str, Any]) -> AuthSession:
    user = payload.get("user")
    access_token = payload.get("access_token")
    if not access_token or not isinstance(user, dict) or not user.get("id"):
        raise UpstreamProviderError("Identity provider returned an incomplete session", tag=TAG)

    try:
        expires_in = int(payload.get("expires_in") or 0)
        expires_at = payload.get("expires_at")
        expires_at = int(time.time()) + expires_in if expires_at is None else int(expires_at)
    except (TypeError, ValueError) as exc:
        raise UpstreamProviderError(
            "Identity provider returned a malformed session expiry",
            cause=exc,
            metadata={"user_id": str(user["id"])},
            tag=TAG,
        ) from exc

    return AuthSession(
        access_token=str(access_token),
        refresh_token=str(payload.get("refresh_token") or ""),
        user_id=str(user["id"]),
        email=str(user.get("email") or ""),
        expires_in=expires_in,
        expires_at=expires_at,
    )


def _parse_datetime(value: Any) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError as exc:
        raise UpstreamProviderError(
            "Identity provider returned a malformed timestamp",
            cause=exc,
            metadata={"value": str(value)},
            tag=TAG,
        ) from exc
