"""Encrypted cookie storage for the per-user session."""

from __future__ import annotations

import base64
import hashlib
import json
import logging
from dataclasses import asdict, dataclass
from typing import Sequence

from cryptography.fernet import Fernet, InvalidToken, MultiFernet
from fastapi import Request, Response

from saas_starter.domain.entities.user import AuthSession


logger = logging.getLogger(__name__)

COOKIE_NAME = "__authSession"
SESSION_MAX_AGE_SECONDS = 60 * 60 * 24 * 7


@dataclass
class CookieSession:
    auth_session: AuthSession | None = None
    flash_error: str | None = None


def _derive_fernet(secret: str) -> Fernet:
    digest = hashlib.sha256(secret.encode("utf-8")).digest()
    return Fernet(base64.urlsafe_b64encode(digest))


class CookieSessionStorage:
    """Read and write ``CookieSession`` values in the ``__authSession`` cookie.

    The first secret encrypts; every secret is tried on decryption, so a new
    secret can be prepended without logging everybody out. A cookie older than
    ``max_age`` is rejected even if the browser still sends it.
    """

    def __init__(
        self,
        *,
        secrets: Sequence[str],
        secure: bool,
        max_age: int = SESSION_MAX_AGE_SECONDS,
    ):
        if not secrets or not all(secrets):
            raise ValueError("Session secret must be provided.")
        self._fernet = MultiFernet([_derive_fernet(secret) for secret in secrets])
        self._secure = secure
        self._max_age = max_age

    def encode(self, session: CookieSession) -> str:
        payload = {
            "authenticated": asdict(session.auth_session) if session.auth_session else None,
            "error": session.flash_error,
        }
        token = self._fernet.encrypt(json.dumps(payload).encode("utf-8"))
        return token.decode("utf-8")

    def decode(self, value: str | None) -> CookieSession:
        if not value:
            return CookieSession()
        try:
            raw = self._fernet.decrypt(value.encode("utf-8"), ttl=self._max_age)
            payload = json.loads(raw)
            authenticated = payload.get("authenticated")
            auth_session = AuthSession(**authenticated) if authenticated else None
            flash_error = payload.get("error")
        except (InvalidToken, ValueError, TypeError, AttributeError):
            logger.info("cookie_session: discarded unreadable cookie")
            return CookieSession()
        return CookieSession(
            auth_session=auth_session,
            flash_error=flash_error if isinstance(flash_error, str) else None,
        )

    def read(self, request: Request) -> CookieSession:
        return self.decode(request.cookies.get(COOKIE_NAME))

    def commit(self, response: Response, session: CookieSession) -> None:
        response.set_cookie(
            COOKIE_NAME,
            self.encode(session),
            max_age=self._max_age,
            path="/",
            httponly=True,
            secure=self._secure,
            samesite="lax",
        )

    def destroy(self, response: Response) -> None:
        response.delete_cookie(
            COOKIE_NAME,
            path="/",
            httponly=True,
            secure=self._secure,
            samesite="lax",
        )
