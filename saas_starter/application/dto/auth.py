from __future__ import annotations

from dataclasses import dataclass

from saas_starter.domain.entities.user import AuthSession


@dataclass(frozen=True)
class CreateUserAccountInput:
    email: str
    password: str
    name: str


@dataclass(frozen=True)
class SignInInput:
    email: str
    password: str


@dataclass(frozen=True)
class RequireAuthSessionInput:
    auth_session: AuthSession | None
    verify: bool = False


@dataclass(frozen=True)
class AuthSessionOutput:
    auth_session: AuthSession
    refreshed: bool


@dataclass(frozen=True)
class DeleteUserAccountOutput:
    user_id: str
    deleted: bool
