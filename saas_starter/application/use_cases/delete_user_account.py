from __future__ import annotations

import logging

from saas_starter.application.dto.auth import DeleteUserAccountOutput
from saas_starter.application.ports.identity_provider_port import IdentityProviderPort
from saas_starter.application.ports.stripe_port import StripePort
from saas_starter.application.ports.user_port import UserPort
from saas_starter.domain.exceptions import AppError, InternalError, NotFoundError
from saas_starter.shared.result import Result, failure, success


logger = logging.getLogger(__name__)

TAG = "user-service"


class DeleteUserAccountUseCase:
    def __init__(
        self,
        *,
        user_port: UserPort,
        identity_port: IdentityProviderPort,
        stripe_port: StripePort,
    ):
        self._user_port = user_port
        self._identity_port = identity_port
        self._stripe_port = stripe_port

    def execute(self, *, user_id: str) -> Result[DeleteUserAccountOutput]:
        try:
            billing_info = self._user_port.get_billing_info(user_id=user_id)
            if billing_info is None:
                raise NotFoundError(
                    "Unable to get billing info",
                    metadata={"user_id": user_id},
                    tag=TAG,
                )
            self._stripe_port.delete_customer(customer_id=billing_info.customer_id)
            self._identity_port.delete_account(user_id=user_id)
            self._user_port.delete_user(user_id=user_id)
        except AppError as exc:
            return failure(
                InternalError(
                    "Unable to delete your account",
                    cause=exc,
                    metadata={"user_id": user_id},
                    tag=TAG,
                )
            )

        logger.info("delete_user_account: deleted user_id=%s", user_id)
        return success(DeleteUserAccountOutput(user_id=user_id, deleted=True))
