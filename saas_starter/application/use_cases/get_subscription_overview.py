from __future__ import annotations

from saas_starter.application.dto.subscription import SubscriptionOverviewOutput
from saas_starter.application.ports.subscription_port import SubscriptionPort
from saas_starter.application.ports.user_port import UserPort
from saas_starter.domain.exceptions import AppError, InternalError, NotFoundError
from saas_starter.shared.result import Result, failure, success


TAG = "subscription-service"


class GetSubscriptionOverviewUseCase:
    def __init__(self, *, user_port: UserPort, subscription_port: SubscriptionPort):
        self._user_port = user_port
        self._subscription_port = subscription_port

    def execute(self, *, user_id: str) -> Result[SubscriptionOverviewOutput]:
        try:
            tier = self._user_port.get_user_tier(user_id=user_id)
            if tier is None:
                raise NotFoundError("Unable to get user tier", metadata={"user_id": user_id}, tag=TAG)
            subscription = self._subscription_port.get_user_subscription(user_id=user_id)
        except AppError as exc:
            return failure(
                InternalError(
                    "Unable to get subscription",
                    cause=exc,
                    metadata={"user_id": user_id},
                    tag=TAG,
                )
            )
        return success(SubscriptionOverviewOutput(tier=tier, subscription=subscription))
