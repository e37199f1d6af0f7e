from __future__ import annotations

import logging
from dataclasses import asdict
from enum import Enum
from typing import Literal, assert_never

from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr

from saas_starter.application.dto.billing import (
    StripeEvent,
    StripeWebhookInput,
    StripeWebhookOutput,
    UpdateTierMetadataInput,
)
from saas_starter.application.ports.stripe_port import StripePort
from saas_starter.domain.entities.tier import TierId
from saas_starter.domain.exceptions import AppError, ValidationError
from saas_starter.shared.result import Failure, Result, failure, success
from saas_starter.shared.validation import parse_data

from .create_local_subscription import CreateLocalSubscriptionUseCase
from .delete_local_subscription import DeleteLocalSubscriptionUseCase
from .fetch_remote_subscription import FetchRemoteSubscriptionUseCase
from .update_local_subscription import UpdateLocalSubscriptionUseCase
from .update_tier_metadata import UpdateTierMetadataUseCase


logger = logging.getLogger(__name__)

TAG = "stripe-webhook"


class StripeEventType(str, Enum):
    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
    SUBSCRIPTION_UPDATED = "customer.subscription.updated"
    SUBSCRIPTION_DELETED = "customer.subscription.deleted"
    PRODUCT_UPDATED = "product.updated"


class CheckoutSessionCompletedPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    subscription: StrictStr
    payment_status: Literal["paid"]


class SubscriptionUpdatedPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: StrictStr


class SubscriptionDeletedPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: StrictStr
    customer: StrictStr


class ProductUpdatedPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: TierId
    active: StrictBool
    name: StrictStr
    description: StrictStr | None


def parse_event_type(value: str) -> StripeEventType | None:
    try:
        return StripeEventType(value)
    except ValueError:
        return None


def _with_trace_id(result: Failure, trace_id: str) -> Failure:
    logger.warning(
        "stripe_webhook: failed event_id=%s trace_id=%s",
        trace_id,
        result.error.trace_id,
    )
    result.error.trace_id = trace_id
    return result


class ProcessStripeWebhookUseCase:
    """Apply one signed Stripe event to the local billing state.

    Money-bearing events only trust the subscription id from the payload and
    re-fetch the subscription from Stripe, so duplicated or out-of-order
    deliveries converge on the same rows. Unknown event types are acknowledged.
    """

    def __init__(
        self,
        *,
        stripe_port: StripePort,
        fetch_remote_subscription: FetchRemoteSubscriptionUseCase,
        create_local_subscription: CreateLocalSubscriptionUseCase,
        update_local_subscription: UpdateLocalSubscriptionUseCase,
        delete_local_subscription: DeleteLocalSubscriptionUseCase,
        update_tier_metadata: UpdateTierMetadataUseCase,
    ):
        self._stripe_port = stripe_port
        self._fetch_remote_subscription = fetch_remote_subscription
        self._create_local_subscription = create_local_subscription
        self._update_local_subscription = update_local_subscription
        self._delete_local_subscription = delete_local_subscription
        self._update_tier_metadata = update_tier_metadata

    def execute(self, command: StripeWebhookInput) -> Result[StripeWebhookOutput]:
        if not command.signature:
            return failure(ValidationError("Missing Stripe signature", tag=TAG))

        try:
            event = self._stripe_port.construct_event(
                payload=command.payload,
                signature=command.signature,
            )
        except AppError as exc:
            return failure(
                ValidationError("Unable to construct Stripe event", cause=exc, tag=TAG)
            )

        event_type = parse_event_type(event.type)
        if event_type is None:
            logger.info("stripe_webhook: ignored event_id=%s type=%s", event.id, event.type)
            return success(
                StripeWebhookOutput(event_id=event.id, event_type=event.type, handled=False, data=None)
            )

        logger.info("stripe_webhook: received event_id=%s type=%s", event.id, event.type)
        try:
            data = self._dispatch(event_type, event)
        except ValidationError as exc:
            return failure(exc)

        if isinstance(data, Failure):
            return _with_trace_id(data, event.id)

        return success(
            StripeWebhookOutput(event_id=event.id, event_type=event.type, handled=True, data=data)
        )

    def _dispatch(self, event_type: StripeEventType, event: StripeEvent) -> dict | Failure:
        message = f"{event.type} payload is malformed"

        if event_type is StripeEventType.CHECKOUT_SESSION_COMPLETED:
            payload = parse_data(
                event.data_object,
                CheckoutSessionCompletedPayload,
                message,
                trace_id=event.id,
            )
            remote = self._fetch_remote_subscription.execute(subscription_id=payload.subscription)
            if isinstance(remote, Failure):
                return remote
            created = self._create_local_subscription.execute(data=remote.data)
            if isinstance(created, Failure):
                return created
            return asdict(created.data)

        if event_type is StripeEventType.SUBSCRIPTION_UPDATED:
            payload = parse_data(
                event.data_object,
                SubscriptionUpdatedPayload,
                message,
                trace_id=event.id,
            )
            remote = self._fetch_remote_subscription.execute(subscription_id=payload.id)
            if isinstance(remote, Failure):
                return remote
            updated = self._update_local_subscription.execute(data=remote.data)
            if isinstance(updated, Failure):
                return updated
            return asdict(updated.data)

        if event_type is StripeEventType.SUBSCRIPTION_DELETED:
            # The subscription no longer exists on Stripe, nothing to re-fetch.
            payload = parse_data(
                event.data_object,
                SubscriptionDeletedPayload,
                message,
                trace_id=event.id,
            )
            deleted = self._delete_local_subscription.execute(
                subscription_id=payload.id,
                customer_id=payload.customer,
            )
            if isinstance(deleted, Failure):
                return deleted
            return asdict(deleted.data)

        if event_type is StripeEventType.PRODUCT_UPDATED:
            payload = parse_data(
                event.data_object,
                ProductUpdatedPayload,
                message,
                trace_id=event.id,
            )
            updated_tier = self._update_tier_metadata.execute(
                UpdateTierMetadataInput(
                    tier_id=payload.id,
                    name=payload.name,
                    active=payload.active,
                    description=payload.description,
                )
            )
            if isinstance(updated_tier, Failure):
                return updated_tier
            return asdict(updated_tier.data)

        assert_never(event_type)
