from __future__ import annotations

from saas_starter.application.dto.billing import DeletedSubscriptionOutput
from saas_starter.application.ports.subscription_port import SubscriptionPort
from saas_starter.domain.exceptions import AppError, InternalError
from saas_starter.shared.result import Result, failure, success


TAG = "subscription-service"


class DeleteLocalSubscriptionUseCase:
    def __init__(self, *, subscription_port: SubscriptionPort):
        self._subscription_port = subscription_port

    def execute(self, *, subscription_id: str, customer_id: str) -> Result[DeletedSubscriptionOutput]:
        try:
            self._subscription_port.delete_subscription(
                subscription_id=subscription_id,
                customer_id=customer_id,
            )
        except AppError as exc:
            return failure(
                InternalError(
                    "Unable to cancel subscription",
                    cause=exc,
                    metadata={"id": subscription_id, "customer_id": customer_id},
                    tag=TAG,
                )
            )
        return success(DeletedSubscriptionOutput(id=subscription_id, deleted=True))
