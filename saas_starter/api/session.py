"""Cookie-backed auth session handling for the HTTP layer.

``require_session`` is the only place where a session gets refreshed, and it
runs as a FastAPI dependency, so a protected handler never sees a stale
session. Any failure to obtain a usable session ends the request with a
redirect to the login page carrying a one-shot flash code.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Generic, TypeVar
from urllib.parse import urlencode

from fastapi import Request, Response
from fastapi.responses import RedirectResponse

from saas_starter.application.dto.auth import RequireAuthSessionInput
from saas_starter.application.use_cases.require_auth_session import RequireAuthSessionUseCase
from saas_starter.domain.entities.user import AuthSession
from saas_starter.infrastructure.security.cookie_session_storage import (
    CookieSession,
    CookieSessionStorage,
)
from saas_starter.shared.result import Failure


logger = logging.getLogger(__name__)

T = TypeVar("T")

LOGIN_PATH = "/login"
HOME_PATH = "/"
REDIRECT_TO_PARAM = "redirectTo"


def safe_redirect(to: str | None, default: str = HOME_PATH) -> str:
    """Only allow same-site absolute paths as redirect targets."""
    if not to or not isinstance(to, str):
        return default
    if not to.startswith("/") or to.startswith("//") or to.startswith("/\\"):
        return default
    return to


def _current_path(request: Request) -> str:
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    return path


@dataclass(frozen=True)
class SessionWithCookie(Generic[T]):
    """A value plus the cookie state that must be written on the response."""

    value: T
    cookie: CookieSession
    storage: CookieSessionStorage = field(repr=False)

    def apply(self, response: Response) -> Response:
        self.storage.commit(response, self.cookie)
        return response


class AuthRedirectError(Exception):
    """Aborts a request with a redirect, optionally rewriting the session cookie."""

    def __init__(
        self,
        location: str,
        *,
        storage: CookieSessionStorage,
        cookie: CookieSession | None = None,
    ):
        super().__init__(location)
        self.location = location
        self.storage = storage
        self.cookie = cookie

    def to_response(self) -> RedirectResponse:
        response = RedirectResponse(self.location, status_code=303)
        if self.cookie is not None:
            self.storage.commit(response, self.cookie)
        return response


class SessionManager:
    def __init__(
        self,
        *,
        storage: CookieSessionStorage,
        require_auth_session: RequireAuthSessionUseCase,
        login_path: str = LOGIN_PATH,
        home_path: str = HOME_PATH,
    ):
        self._storage = storage
        self._require_auth_session = require_auth_session
        self._login_path = login_path
        self._home_path = home_path

    def create_session(self, auth_session: AuthSession, *, redirect_to: str | None = None) -> RedirectResponse:
        response = RedirectResponse(safe_redirect(redirect_to, self._home_path), status_code=303)
        self._storage.commit(response, CookieSession(auth_session=auth_session))
        logger.info("session: created user_id=%s", auth_session.user_id)
        return response

    def require_session(
        self,
        request: Request,
        *,
        on_fail_redirect_to: str | None = None,
        verify: bool = False,
    ) -> SessionWithCookie[AuthSession]:
        cookie = self._storage.read(request)
        result = self._require_auth_session.execute(
            RequireAuthSessionInput(auth_session=cookie.auth_session, verify=verify)
        )
        if isinstance(result, Failure):
            query = urlencode({REDIRECT_TO_PARAM: _current_path(request)})
            location = f"{on_fail_redirect_to or self._login_path}?{query}"
            raise AuthRedirectError(
                location,
                storage=self._storage,
                cookie=CookieSession(auth_session=None, flash_error=result.error.code),
            )

        output = result.data
        return SessionWithCookie(
            value=output.auth_session,
            cookie=CookieSession(auth_session=output.auth_session),
            storage=self._storage,
        )

    def destroy_session(self) -> RedirectResponse:
        response = RedirectResponse(self._home_path, status_code=303)
        self._storage.destroy(response)
        return response

    def is_anonymous(self, request: Request) -> bool:
        return self._storage.read(request).auth_session is None

    def consume_flash_error(self, request: Request) -> SessionWithCookie[str | None]:
        cookie = self._storage.read(request)
        return SessionWithCookie(
            value=cookie.flash_error,
            cookie=CookieSession(auth_session=cookie.auth_session, flash_error=None),
            storage=self._storage,
        )

    def redirect(self, location: str, *, session: SessionWithCookie | None = None) -> RedirectResponse:
        response = RedirectResponse(location, status_code=303)
        if session is not None:
            session.apply(response)
        return response

