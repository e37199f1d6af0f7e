from __future__ import annotations

from datetime import datetime, timezone

from saas_starter.application.use_cases.fetch_remote_subscription import FetchRemoteSubscriptionUseCase
from saas_starter.domain.exceptions import UpstreamProviderError, ValidationError
from saas_starter.shared.result import Failure, Success


def stripe_subscription(**overrides) -> dict:
    payload = {
        "id": "sub_1",
        "object": "subscription",
        "customer": "cus_1",
        "status": "active",
        "currency": "usd",
        "current_period_start": 1_700_000_000,
        "current_period_end": 1_702_592_000,
        "cancel_at_period_end": False,
        "items": {
            "object": "list",
            "data": [{"id": "si_1", "price": {"id": "price_1", "product": "tier_1"}}],
        },
    }
    payload.update(overrides)
    return payload


class FakeStripePort:
    def __init__(self, payload: dict | None = None, *, fails: bool = False):
        self.payload = payload
        self.fails = fails
        self.calls: list[str] = []

    def retrieve_subscription(self, *, subscription_id: str) -> dict:
        self.calls.append(subscription_id)
        if self.fails:
            raise UpstreamProviderError("Failed to retrieve Stripe subscription")
        return self.payload


def test_fetch_maps_subscription_to_local_shape():
    port = FakeStripePort(stripe_subscription())

    result = FetchRemoteSubscriptionUseCase(stripe_port=port).execute(subscription_id="sub_1")

    assert isinstance(result, Success)
    data = result.data
    assert port.calls == ["sub_1"]
    assert data.id == "sub_1"
    assert data.customer_id == "cus_1"
    assert data.tier_id == "tier_1"
    assert data.item_id == "si_1"
    assert data.price_id == "price_1"
    assert data.status == "active"
    assert data.currency == "usd"
    assert data.cancel_at_period_end is False
    assert data.current_period_start == datetime.fromtimestamp(1_700_000_000, tz=timezone.utc)
    assert data.current_period_end == datetime.fromtimestamp(1_702_592_000, tz=timezone.utc)


def test_fetch_rejects_multi_item_subscription():
    items = {
        "data": [
            {"id": "si_1", "price": {"id": "price_1", "product": "tier_1"}},
            {"id": "si_2", "price": {"id": "price_2", "product": "tier_2"}},
        ]
    }
    port = FakeStripePort(stripe_subscription(items=items))

    result = FetchRemoteSubscriptionUseCase(stripe_port=port).execute(subscription_id="sub_1")

    assert isinstance(result, Failure)
    assert isinstance(result.error.cause, ValidationError)


def test_fetch_rejects_unknown_tier_and_status():
    bad_product = stripe_subscription(
        items={"data": [{"id": "si_1", "price": {"id": "price_1", "product": "prod_other"}}]}
    )
    bad_status = stripe_subscription(status="mystery")

    for payload in (bad_product, bad_status):
        result = FetchRemoteSubscriptionUseCase(stripe_port=FakeStripePort(payload)).execute(
            subscription_id="sub_1"
        )
        assert isinstance(result, Failure)
        assert isinstance(result.error.cause, ValidationError)


def test_fetch_rejects_non_integer_period_bounds():
    port = FakeStripePort(stripe_subscription(current_period_end="1702592000"))

    result = FetchRemoteSubscriptionUseCase(stripe_port=port).execute(subscription_id="sub_1")

    assert isinstance(result, Failure)


def test_fetch_wraps_provider_error():
    port = FakeStripePort(fails=True)

    result = FetchRemoteSubscriptionUseCase(stripe_port=port).execute(subscription_id="sub_1")

    assert isinstance(result, Failure)
    assert isinstance(result.error, UpstreamProviderError)
    assert result.error.message == "Unable to retrieve subscription"
    assert result.error.metadata == {"id": "sub_1"}
