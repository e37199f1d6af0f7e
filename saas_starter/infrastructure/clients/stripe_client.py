from __future__ import annotations

import logging
from typing import Any

import stripe

from saas_starter.application.dto.billing import StripeEvent
from saas_starter.application.ports.stripe_port import StripePort
from saas_starter.domain.exceptions import UpstreamProviderError, ValidationError


logger = logging.getLogger(__name__)

TAG = "stripe-client"


class StripeClient(StripePort):
    """Stripe adapter.

    Credentials and the API version travel with every call instead of being
    assigned to the ``stripe`` module, so two clients never share state.
    """

    def __init__(
        self,
        *,
        secret_key: str,
        endpoint_secret: str,
        server_url: str,
        api_version: str = "2022-11-15",
    ):
        self._secret_key = secret_key
        self._endpoint_secret = endpoint_secret
        self._server_url = server_url.rstrip("/")
        self._api_version = api_version

    def _options(self) -> dict[str, str]:
        return {"api_key": self._secret_key, "stripe_version": self._api_version}

    def create_customer(self, *, email: str, name: str) -> str:
        try:
            customer = stripe.Customer.create(email=email, name=name, **self._options())
        except stripe.StripeError as exc:
            raise UpstreamProviderError(
                "Failed to create Stripe customer",
                cause=exc,
                metadata={"email": email},
                tag=TAG,
            ) from exc

        customer_id = getattr(customer, "id", None)
        if not customer_id:
            raise UpstreamProviderError("Stripe customer id is missing", tag=TAG)
        logger.info("stripe_client: customer_created customer_id=%s", customer_id)
        return str(customer_id)

    def delete_customer(self, *, customer_id: str) -> None:
        try:
            stripe.Customer.delete(customer_id, **self._options())
        except stripe.StripeError as exc:
            raise UpstreamProviderError(
                "Failed to delete Stripe customer",
                cause=exc,
                metadata={"customer_id": customer_id},
                tag=TAG,
            ) from exc
        logger.info("stripe_client: customer_deleted customer_id=%s", customer_id)

    def create_checkout_session(self, *, customer_id: str, price_id: str) -> str:
        try:
            session = stripe.checkout.Session.create(
                mode="subscription",
                customer=customer_id,
                payment_method_types=["card"],
                line_items=[{"price": price_id, "quantity": 1}],
                success_url=f"{self._server_url}/checkout",
                cancel_url=f"{self._server_url}/subscription",
                **self._options(),
            )
        except stripe.StripeError as exc:
            raise UpstreamProviderError(
                "Failed to create Stripe checkout session",
                cause=exc,
                metadata={"customer_id": customer_id, "price_id": price_id},
                tag=TAG,
            ) from exc

        session_url = getattr(session, "url", None)
        if not session_url:
            raise UpstreamProviderError(
                "Stripe checkout session response is incomplete",
                metadata={"customer_id": customer_id, "price_id": price_id},
                tag=TAG,
            )
        return str(session_url)

    def create_billing_portal_session(self, *, customer_id: str) -> str:
        try:
            session = stripe.billing_portal.Session.create(
                customer=customer_id,
                return_url=f"{self._server_url}/subscription",
                **self._options(),
            )
        except stripe.StripeError as exc:
            raise UpstreamProviderError(
                "Failed to create Stripe billing portal session",
                cause=exc,
                metadata={"customer_id": customer_id},
                tag=TAG,
            ) from exc

        session_url = getattr(session, "url", None)
        if not session_url:
            raise UpstreamProviderError(
                "Stripe billing portal session response is incomplete",
                metadata={"customer_id": customer_id},
                tag=TAG,
            )
        return str(session_url)

    def retrieve_subscription(self, *, subscription_id: str) -> dict[str, Any]:
        try:
            subscription = stripe.Subscription.retrieve(subscription_id, **self._options())
        except stripe.StripeError as exc:
            raise UpstreamProviderError(
                "Failed to retrieve Stripe subscription",
                cause=exc,
                metadata={"subscription_id": subscription_id},
                tag=TAG,
            ) from exc
        return subscription.to_dict()

    def construct_event(self, *, payload: bytes, signature: str) -> StripeEvent:
        try:
            event = stripe.Webhook.construct_event(
                payload=payload,
                sig_header=signature,
                secret=self._endpoint_secret,
                api_key=self._secret_key,
            )
        except stripe.SignatureVerificationError as exc:
            raise ValidationError("Invalid Stripe webhook signature", cause=exc, tag=TAG) from exc
        except ValueError as exc:
            raise ValidationError("Invalid Stripe webhook payload", cause=exc, tag=TAG) from exc

        data = event.to_dict()
        data_object = (data.get("data") or {}).get("object") or {}
        return StripeEvent(
            id=str(data.get("id", "")),
            type=str(data.get("type", "")),
            data_object=dict(data_object),
        )
