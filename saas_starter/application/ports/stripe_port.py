from __future__ import annotations

from typing import Any, Protocol

from saas_starter.application.dto.billing import StripeEvent


class StripePort(Protocol):
    def create_customer(self, *, email: str, name: str) -> str:
        ...

    def delete_customer(self, *, customer_id: str) -> None:
        ...

    def create_checkout_session(self, *, customer_id: str, price_id: str) -> str:
        ...

    def create_billing_portal_session(self, *, customer_id: str) -> str:
        ...

    def retrieve_subscription(self, *, subscription_id: str) -> dict[str, Any]:
        ...

    def construct_event(self, *, payload: bytes, signature: str) -> StripeEvent:
        ...
