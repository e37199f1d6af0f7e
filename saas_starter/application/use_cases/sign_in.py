from __future__ import annotations

from saas_starter.application.dto.auth import SignInInput
from saas_starter.application.ports.identity_provider_port import IdentityProviderPort
from saas_starter.domain.entities.user import AuthSession
from saas_starter.domain.exceptions import AppError
from saas_starter.shared.result import Result, failure, success

from .auth_common import normalize_email


class SignInUseCase:
    def __init__(self, *, identity_port: IdentityProviderPort):
        self._identity_port = identity_port

    def execute(self, command: SignInInput) -> Result[AuthSession]:
        try:
            auth_session = self._identity_port.sign_in(
                email=normalize_email(command.email),
                password=command.password,
            )
        except AppError as exc:
            return failure(exc)
        return success(auth_session)
