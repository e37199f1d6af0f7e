from __future__ import annotations

import logging

from saas_starter.application.dto.billing import CreateCheckoutSessionInput, RedirectUrlOutput
from saas_starter.application.ports.stripe_port import StripePort
from saas_starter.application.ports.subscription_port import SubscriptionPort
from saas_starter.application.ports.user_port import UserPort
from saas_starter.domain.exceptions import AppError, NotFoundError, ValidationError
from saas_starter.shared.result import Result, failure, success


logger = logging.getLogger(__name__)

TAG = "billing-service"


class CreateCheckoutSessionUseCase:
    def __init__(
        self,
        *,
        user_port: UserPort,
        subscription_port: SubscriptionPort,
        stripe_port: StripePort,
    ):
        self._user_port = user_port
        self._subscription_port = subscription_port
        self._stripe_port = stripe_port

    def execute(self, command: CreateCheckoutSessionInput) -> Result[RedirectUrlOutput]:
        metadata = {"user_id": command.user_id, "price_id": command.price_id}
        try:
            billing_info = self._user_port.get_billing_info(user_id=command.user_id)
            if billing_info is None:
                raise NotFoundError("Unable to get billing info", metadata=metadata, tag=TAG)

            subscription = self._subscription_port.get_user_subscription(user_id=command.user_id)
            if subscription is not None and subscription.price_id == command.price_id:
                raise ValidationError("You are already subscribed to this tier", metadata=metadata, tag=TAG)

            url = self._stripe_port.create_checkout_session(
                customer_id=billing_info.customer_id,
                price_id=command.price_id,
            )
        except AppError as exc:
            return failure(exc)

        logger.info("checkout: session_created user_id=%s price_id=%s", command.user_id, command.price_id)
        return success(RedirectUrlOutput(url=url))
