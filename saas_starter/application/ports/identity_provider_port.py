from __future__ import annotations

from typing import Protocol

from saas_starter.domain.entities.user import AuthAccount, AuthSession


class IdentityProviderPort(Protocol):
    def create_account(self, *, email: str, password: str) -> AuthAccount:
        ...

    def sign_in(self, *, email: str, password: str) -> AuthSession:
        ...

    def refresh_session(self, *, refresh_token: str) -> AuthSession:
        ...

    def verify_access_token(self, *, access_token: str) -> None:
        ...

    def delete_account(self, *, user_id: str) -> None:
        ...

    def find_user_id_by_email(self, *, email: str) -> str | None:
        ...
