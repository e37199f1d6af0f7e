from __future__ import annotations

import logging

from saas_starter.application.dto.auth import CreateUserAccountInput
from saas_starter.application.ports.identity_provider_port import IdentityProviderPort
from saas_starter.application.ports.stripe_port import StripePort
from saas_starter.application.ports.user_port import UserPort
from saas_starter.domain.entities.tier import BASELINE_TIER_ID
from saas_starter.domain.entities.user import AuthSession
from saas_starter.domain.exceptions import AppError, InternalError, ValidationError
from saas_starter.shared.result import Result, failure, success

from .auth_common import normalize_email


logger = logging.getLogger(__name__)

TAG = "user-service"


class CreateUserAccountUseCase:
    """Sign a new user up and return their first auth session.

    The identity account is created first. If anything after that fails, the
    identity account (and the billing customer, when it exists) is removed so
    the same email can be used again.
    """

    def __init__(
        self,
        *,
        user_port: UserPort,
        identity_port: IdentityProviderPort,
        stripe_port: StripePort,
        default_currency: str,
    ):
        self._user_port = user_port
        self._identity_port = identity_port
        self._stripe_port = stripe_port
        self._default_currency = default_currency

    def execute(self, command: CreateUserAccountInput) -> Result[AuthSession]:
        email = normalize_email(command.email)
        name = command.name.strip()

        try:
            existing_user = self._user_port.get_user_by_email(email=email)
        except AppError as exc:
            return failure(exc)
        if existing_user is not None:
            return failure(
                ValidationError(
                    "This email has already been used",
                    metadata={"email": email},
                    tag=TAG,
                    status=403,
                )
            )

        user_id: str | None = None
        customer_id: str | None = None
        try:
            account = self._identity_port.create_account(email=email, password=command.password)
            user_id = account.id
            auth_session = self._identity_port.sign_in(email=email, password=command.password)
            customer_id = self._stripe_port.create_customer(email=email, name=name)
            self._user_port.create_user(
                user_id=user_id,
                email=email,
                name=name,
                customer_id=customer_id,
                currency=self._default_currency,
                tier_id=BASELINE_TIER_ID,
            )
        except AppError as exc:
            self._compensate(email=email, user_id=user_id, customer_id=customer_id)
            return failure(
                InternalError(
                    "Unable to create user account",
                    cause=exc,
                    metadata={"email": email, "name": name},
                    tag=TAG,
                )
            )

        logger.info("create_user_account: created user_id=%s", user_id)
        return success(auth_session)

    def _compensate(self, *, email: str, user_id: str | None, customer_id: str | None) -> None:
        if customer_id is not None:
            try:
                self._stripe_port.delete_customer(customer_id=customer_id)
            except AppError:
                logger.error(
                    "create_user_account: orphan_customer customer_id=%s email=%s",
                    customer_id,
                    email,
                )

        try:
            if user_id is None:
                user_id = self._identity_port.find_user_id_by_email(email=email)
            if user_id is not None:
                self._identity_port.delete_account(user_id=user_id)
        except AppError:
            # Requires a manual cleanup in the identity provider dashboard.
            logger.error("create_user_account: orphan_auth_account email=%s", email)
