from __future__ import annotations

import logging
from typing import Callable

from saas_starter.application.dto.auth import AuthSessionOutput, RequireAuthSessionInput
from saas_starter.application.ports.identity_provider_port import IdentityProviderPort
from saas_starter.domain.exceptions import AppError, AuthError
from saas_starter.domain.services.session_expiry import (
    REFRESH_ACCESS_TOKEN_THRESHOLD_SECONDS,
    is_expiring_soon,
    now_ms,
)
from saas_starter.shared.result import Result, failure, success

from .auth_common import AUTH_TAG


logger = logging.getLogger(__name__)

NO_USER_SESSION = "no-user-session"
FAIL_REFRESH_AUTH_SESSION = "fail-refresh-auth-session"


class RequireAuthSessionUseCase:
    """Decide whether a cookie session can be used as-is, must be refreshed, or is lost.

    The caller owns the cookie and the redirect; this use case only resolves the
    session value. A failure always carries an ``AuthError`` whose ``code`` is the
    flash message to show on the login page.
    """

    def __init__(
        self,
        *,
        identity_port: IdentityProviderPort,
        threshold_seconds: int = REFRESH_ACCESS_TOKEN_THRESHOLD_SECONDS,
        clock: Callable[[], int] = now_ms,
    ):
        self._identity_port = identity_port
        self._threshold_seconds = threshold_seconds
        self._clock = clock

    def execute(self, command: RequireAuthSessionInput) -> Result[AuthSessionOutput]:
        auth_session = command.auth_session
        if auth_session is None:
            logger.debug("require_auth_session: no_user_session")
            return failure(
                AuthError("No user session found", code=NO_USER_SESSION, tag=AUTH_TAG)
            )

        verified = True
        if command.verify:
            verified = self._verify(auth_session.access_token, user_id=auth_session.user_id)

        expiring = is_expiring_soon(
            auth_session.expires_at,
            now_millis=self._clock(),
            threshold_seconds=self._threshold_seconds,
        )
        if not verified or expiring:
            return self._refresh(auth_session.refresh_token, user_id=auth_session.user_id)

        return success(AuthSessionOutput(auth_session=auth_session, refreshed=False))

    def _verify(self, access_token: str, *, user_id: str) -> bool:
        try:
            self._identity_port.verify_access_token(access_token=access_token)
        except AppError as exc:
            logger.warning(
                "require_auth_session: verify_failed user_id=%s trace_id=%s",
                user_id,
                exc.trace_id,
            )
            return False
        return True

    def _refresh(self, refresh_token: str, *, user_id: str) -> Result[AuthSessionOutput]:
        if not refresh_token:
            return failure(
                AuthError(
                    "No refresh token provided",
                    code=FAIL_REFRESH_AUTH_SESSION,
                    metadata={"user_id": user_id},
                    tag=AUTH_TAG,
                )
            )
        try:
            refreshed = self._identity_port.refresh_session(refresh_token=refresh_token)
        except AppError as exc:
            return failure(
                AuthError(
                    "Failed to refresh access token",
                    code=FAIL_REFRESH_AUTH_SESSION,
                    cause=exc,
                    metadata={"user_id": user_id},
                    tag=AUTH_TAG,
                )
            )

        logger.info("require_auth_session: refreshed user_id=%s", refreshed.user_id)
        return success(AuthSessionOutput(auth_session=refreshed, refreshed=True))
