from __future__ import annotations

from saas_starter.application.dto.billing import CreatedSubscriptionOutput
from saas_starter.application.ports.subscription_port import SubscriptionPort
from saas_starter.domain.entities.subscription import RemoteSubscription
from saas_starter.domain.exceptions import AppError, InternalError
from saas_starter.shared.result import Result, failure, success


TAG = "subscription-service"


class CreateLocalSubscriptionUseCase:
    def __init__(self, *, subscription_port: SubscriptionPort):
        self._subscription_port = subscription_port

    def execute(self, *, data: RemoteSubscription) -> Result[CreatedSubscriptionOutput]:
        try:
            subscription = self._subscription_port.create_subscription(data=data)
        except AppError as exc:
            return failure(
                InternalError(
                    "Unable to create subscription",
                    cause=exc,
                    metadata={
                        "customer_id": data.customer_id,
                        "tier_id": data.tier_id,
                        "id": data.id,
                        "price_id": data.price_id,
                        "item_id": data.item_id,
                    },
                    tag=TAG,
                )
            )
        return success(
            CreatedSubscriptionOutput(
                id=subscription.id,
                user_id=subscription.user_id,
                created_at=subscription.created_at,
            )
        )
