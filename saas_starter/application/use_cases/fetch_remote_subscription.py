from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr

from saas_starter.application.ports.stripe_port import StripePort
from saas_starter.domain.entities.price import Currency
from saas_starter.domain.entities.subscription import RemoteSubscription, SubscriptionStatus
from saas_starter.domain.entities.tier import TierId
from saas_starter.domain.exceptions import AppError, UpstreamProviderError
from saas_starter.shared.result import Result, failure, success
from saas_starter.shared.validation import parse_data


TAG = "subscription-service"


class _StripePrice(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: StrictStr
    product: TierId


class _StripeSubscriptionItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: StrictStr
    price: _StripePrice


class _StripeSubscriptionItems(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Multi-item subscriptions are not supported.
    data: list[_StripeSubscriptionItem] = Field(min_length=1, max_length=1)


class StripeSubscriptionPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: StrictStr
    customer: StrictStr
    status: SubscriptionStatus
    currency: Currency
    current_period_start: StrictInt
    current_period_end: StrictInt
    cancel_at_period_end: StrictBool
    items: _StripeSubscriptionItems


def to_datetime(timestamp: int) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def map_stripe_subscription(payload: StripeSubscriptionPayload) -> RemoteSubscription:
    item = payload.items.data[0]
    return RemoteSubscription(
        id=payload.id,
        customer_id=payload.customer,
        tier_id=item.price.product,
        item_id=item.id,
        price_id=item.price.id,
        status=payload.status,
        currency=payload.currency,
        current_period_start=to_datetime(payload.current_period_start),
        current_period_end=to_datetime(payload.current_period_end),
        cancel_at_period_end=payload.cancel_at_period_end,
    )


class FetchRemoteSubscriptionUseCase:
    """Read the authoritative subscription from Stripe and map it to the local shape."""

    def __init__(self, *, stripe_port: StripePort):
        self._stripe_port = stripe_port

    def execute(self, *, subscription_id: str) -> Result[RemoteSubscription]:
        try:
            raw = self._stripe_port.retrieve_subscription(subscription_id=subscription_id)
            payload = parse_data(
                raw,
                StripeSubscriptionPayload,
                "Stripe subscription fetch result is malformed",
            )
        except AppError as exc:
            return failure(
                UpstreamProviderError(
                    "Unable to retrieve subscription",
                    cause=exc,
                    metadata={"id": subscription_id},
                    tag=TAG,
                )
            )
        return success(map_stripe_subscription(payload))
