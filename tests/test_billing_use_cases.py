from __future__ import annotations

from datetime import datetime, timezone

from saas_starter.application.dto.billing import CreateCheckoutSessionInput
from saas_starter.application.use_cases.create_billing_portal_session import (
    CreateBillingPortalSessionUseCase,
)
from saas_starter.application.use_cases.create_checkout_session import CreateCheckoutSessionUseCase
from saas_starter.application.use_cases.get_pricing_plan import GetPricingPlanUseCase
from saas_starter.application.use_cases.get_subscription_overview import GetSubscriptionOverviewUseCase
from saas_starter.domain.entities.price import ActivePrice
from saas_starter.domain.entities.subscription import UserSubscription
from saas_starter.domain.entities.tier import Tier
from saas_starter.domain.entities.user import BillingInfo
from saas_starter.domain.exceptions import InternalError, NotFoundError, UpstreamProviderError, ValidationError
from saas_starter.shared.result import Failure, Success


def _price(price_id: str, amount: int | None, interval: str = "month") -> ActivePrice:
    return ActivePrice(
        price_id=price_id,
        interval=interval,
        tier_id="tier_1",
        tier_name="Pro Tier",
        tier_description="For regular users",
        tier_features_list=["Up to 4 notes"],
        tier_active=True,
        amount=amount,
    )


class FakePricingPort:
    def __init__(self, prices: list[ActivePrice]):
        self.prices = prices
        self.calls: list[str] = []

    def list_active_prices(self, *, currency: str) -> list[ActivePrice]:
        self.calls.append(currency)
        return self.prices


class FakeUserPort:
    def __init__(self, billing_info: BillingInfo | None = None, tier: Tier | None = None):
        self.billing_info = billing_info
        self.tier = tier

    def get_billing_info(self, *, user_id: str) -> BillingInfo | None:
        return self.billing_info

    def get_user_tier(self, *, user_id: str) -> Tier | None:
        return self.tier


class FakeSubscriptionPort:
    def __init__(self, subscription: UserSubscription | None = None):
        self.subscription = subscription

    def get_user_subscription(self, *, user_id: str) -> UserSubscription | None:
        return self.subscription


class FakeStripePort:
    def __init__(self, *, fail: bool = False):
        self.fail = fail
        self.checkouts: list[tuple[str, str]] = []
        self.portals: list[str] = []

    def create_checkout_session(self, *, customer_id: str, price_id: str) -> str:
        if self.fail:
            raise UpstreamProviderError("Unable to create checkout session")
        self.checkouts.append((customer_id, price_id))
        return "https://checkout.stripe.test/session"

    def create_billing_portal_session(self, *, customer_id: str) -> str:
        self.portals.append(customer_id)
        return "https://billing.stripe.test/portal"


def _subscription(price_id: str) -> UserSubscription:
    return UserSubscription(
        id="sub_1",
        tier_id="tier_1",
        price_id=price_id,
        status="active",
        cancel_at_period_end=False,
        current_period_end=datetime(2024, 2, 1, tzinfo=timezone.utc),
        interval="month",
    )


def test_pricing_plan_maps_prices():
    port = FakePricingPort([_price("price_m", 1000), _price("price_y", 10000, interval="year")])

    result = GetPricingPlanUseCase(pricing_port=port).execute(currency="eur")

    assert isinstance(result, Success)
    assert [(e.price_id, e.amount, e.currency) for e in result.data] == [
        ("price_m", 1000, "eur"),
        ("price_y", 10000, "eur"),
    ]
    assert result.data[0].name == "Pro Tier"
    assert port.calls == ["eur"]


def test_pricing_plan_rejects_missing_amount():
    port = FakePricingPort([_price("price_m", 1000), _price("price_y", None, interval="year")])

    result = GetPricingPlanUseCase(pricing_port=port).execute(currency="usd")

    assert isinstance(result, Failure)
    assert isinstance(result.error, InternalError)
    assert result.error.metadata["price_id"] == "price_y"


def test_pricing_plan_rejects_unsupported_currency():
    port = FakePricingPort([])

    result = GetPricingPlanUseCase(pricing_port=port).execute(currency="gbp")

    assert isinstance(result, Failure)
    assert isinstance(result.error, ValidationError)
    assert port.calls == []


def test_checkout_requires_billing_info():
    stripe_port = FakeStripePort()
    use_case = CreateCheckoutSessionUseCase(
        user_port=FakeUserPort(billing_info=None),
        subscription_port=FakeSubscriptionPort(),
        stripe_port=stripe_port,
    )

    result = use_case.execute(CreateCheckoutSessionInput(user_id="user-1", price_id="price_m"))

    assert isinstance(result, Failure)
    assert isinstance(result.error, NotFoundError)
    assert stripe_port.checkouts == []


def test_checkout_refuses_same_price():
    stripe_port = FakeStripePort()
    use_case = CreateCheckoutSessionUseCase(
        user_port=FakeUserPort(billing_info=BillingInfo(customer_id="cus_1", currency="usd")),
        subscription_port=FakeSubscriptionPort(_subscription("price_m")),
        stripe_port=stripe_port,
    )

    result = use_case.execute(CreateCheckoutSessionInput(user_id="user-1", price_id="price_m"))

    assert isinstance(result, Failure)
    assert result.error.message == "You are already subscribed to this tier"
    assert stripe_port.checkouts == []


def test_checkout_for_other_price_returns_url():
    stripe_port = FakeStripePort()
    use_case = CreateCheckoutSessionUseCase(
        user_port=FakeUserPort(billing_info=BillingInfo(customer_id="cus_1", currency="usd")),
        subscription_port=FakeSubscriptionPort(_subscription("price_m")),
        stripe_port=stripe_port,
    )

    result = use_case.execute(CreateCheckoutSessionInput(user_id="user-1", price_id="price_y"))

    assert isinstance(result, Success)
    assert result.data.url == "https://checkout.stripe.test/session"
    assert stripe_port.checkouts == [("cus_1", "price_y")]


def test_checkout_propagates_provider_failure():
    use_case = CreateCheckoutSessionUseCase(
        user_port=FakeUserPort(billing_info=BillingInfo(customer_id="cus_1", currency="usd")),
        subscription_port=FakeSubscriptionPort(),
        stripe_port=FakeStripePort(fail=True),
    )

    result = use_case.execute(CreateCheckoutSessionInput(user_id="user-1", price_id="price_m"))

    assert isinstance(result, Failure)
    assert isinstance(result.error, UpstreamProviderError)


def test_billing_portal_uses_customer_id():
    stripe_port = FakeStripePort()
    use_case = CreateBillingPortalSessionUseCase(
        user_port=FakeUserPort(billing_info=BillingInfo(customer_id="cus_9", currency="eur")),
        stripe_port=stripe_port,
    )

    result = use_case.execute(user_id="user-1")

    assert isinstance(result, Success)
    assert result.data.url == "https://billing.stripe.test/portal"
    assert stripe_port.portals == ["cus_9"]


def test_subscription_overview():
    tier = Tier(id="tier_1", name="Pro Tier", description=None, active=True, features_list=["a"])
    use_case = GetSubscriptionOverviewUseCase(
        user_port=FakeUserPort(tier=tier),
        subscription_port=FakeSubscriptionPort(_subscription("price_m")),
    )

    result = use_case.execute(user_id="user-1")

    assert isinstance(result, Success)
    assert result.data.tier == tier
    assert result.data.subscription.price_id == "price_m"


def test_subscription_overview_without_tier_fails():
    use_case = GetSubscriptionOverviewUseCase(
        user_port=FakeUserPort(tier=None),
        subscription_port=FakeSubscriptionPort(),
    )

    result = use_case.execute(user_id="user-1")

    assert isinstance(result, Failure)
    assert result.error.message == "Unable to get subscription"
