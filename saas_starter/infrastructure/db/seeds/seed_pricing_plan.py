from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import get_args

import stripe
from sqlalchemy import text

from saas_starter.domain.entities.price import Currency, Interval
from saas_starter.infrastructure.db.engine import get_engine
from saas_starter.shared.config import get_settings


logger = logging.getLogger(__name__)


PRICING_PLAN = {
    "free": {
        "name": "Free Tier",
        "description": "Free forever",
        "features_list": ["Up to 2 notes", "Limited support"],
        "max_number_of_notes": 2,
        "price": {"month": {"usd": 0, "eur": 0}, "year": {"usd": 0, "eur": 0}},
    },
    "tier_1": {
        "name": "Pro Tier",
        "description": "For power users",
        "features_list": ["Free Tier features", "Up to 4 notes"],
        "max_number_of_notes": 4,
        "price": {"month": {"usd": 999, "eur": 999}, "year": {"usd": 9990, "eur": 9990}},
    },
    "tier_2": {
        "name": "Pro Plus Tier",
        "description": "For power power users",
        "features_list": ["Pro Tier features", "Unlimited notes"],
        "max_number_of_notes": None,
        "price": {"month": {"usd": 1999, "eur": 1999}, "year": {"usd": 19990, "eur": 19990}},
    },
}


@dataclass(frozen=True)
class SeedPrice:
    price_id: str
    tier_id: str
    interval: str
    amounts: dict[str, int]


def create_stripe_catalog(*, secret_key: str, api_version: str, default_currency: str) -> list[SeedPrice]:
    """Create one Stripe product per tier and one price per interval.

    The default currency is the price's own currency, every other currency is
    attached as a currency option of the same price.
    """
    options = {"api_key": secret_key, "stripe_version": api_version}
    seeded: list[SeedPrice] = []
    for tier_id, tier in PRICING_PLAN.items():
        stripe.Product.create(
            id=tier_id,
            name=tier["name"],
            description=tier["description"],
            **options,
        )
        for interval in get_args(Interval):
            amounts = tier["price"][interval]
            currency_options = {
                currency: {"unit_amount": amount, "tax_behavior": "inclusive"}
                for currency, amount in amounts.items()
                if currency != default_currency
            }
            price = stripe.Price.create(
                product=tier_id,
                currency=default_currency,
                unit_amount=amounts[default_currency],
                nickname=f"{tier['name']} {interval}ly",
                tax_behavior="inclusive",
                recurring={"interval": interval},
                currency_options=currency_options,
                **options,
            )
            seeded.append(SeedPrice(price_id=price.id, tier_id=tier_id, interval=interval, amounts=dict(amounts)))
    return seeded


def seed_pricing_plan(engine, prices: list[SeedPrice]) -> None:
    now = datetime.now(timezone.utc)
    with engine.begin() as conn:
        for tier_id, tier in PRICING_PLAN.items():
            conn.execute(
                text(
                    """
                    INSERT INTO tiers (id, name, description, active, features_list, created_at, updated_at)
                    VALUES (:id, :name, :description, :active, :features_list, :now, :now)
                    ON CONFLICT (id) DO UPDATE
                    SET name = excluded.name,
                        description = excluded.description,
                        features_list = excluded.features_list,
                        updated_at = excluded.updated_at
                    """
                ),
                {
                    "id": tier_id,
                    "name": tier["name"],
                    "description": tier["description"],
                    "active": True,
                    "features_list": json.dumps(tier["features_list"]),
                    "now": now,
                },
            )
            conn.execute(
                text(
                    """
                    INSERT INTO tier_limits (id, tier_id, max_number_of_notes)
                    VALUES (:id, :tier_id, :max_number_of_notes)
                    ON CONFLICT (id) DO UPDATE
                    SET max_number_of_notes = excluded.max_number_of_notes
                    """
                ),
                {
                    "id": tier_id,
                    "tier_id": tier_id,
                    "max_number_of_notes": tier["max_number_of_notes"],
                },
            )

        for price in prices:
            conn.execute(
                text(
                    """
                    INSERT INTO prices (id, tier_id, interval, active, created_at, updated_at)
                    VALUES (:id, :tier_id, :interval, :active, :now, :now)
                    ON CONFLICT (id) DO UPDATE
                    SET tier_id = excluded.tier_id,
                        interval = excluded.interval,
                        updated_at = excluded.updated_at
                    """
                ),
                {
                    "id": price.price_id,
                    "tier_id": price.tier_id,
                    "interval": price.interval,
                    "active": True,
                    "now": now,
                },
            )
            for currency in get_args(Currency):
                conn.execute(
                    text(
                        """
                        INSERT INTO price_currencies (id, price_id, currency, amount)
                        VALUES (:id, :price_id, :currency, :amount)
                        ON CONFLICT (price_id, currency) DO UPDATE
                        SET amount = excluded.amount
                        """
                    ),
                    {
                        "id": f"{price.price_id}_{currency}",
                        "price_id": price.price_id,
                        "currency": currency,
                        "amount": price.amounts[currency],
                    },
                )
    logger.info("seed_pricing_plan: seeded tiers=%s prices=%s", len(PRICING_PLAN), len(prices))


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    settings = get_settings()
    prices = create_stripe_catalog(
        secret_key=settings.stripe_secret_key,
        api_version=settings.stripe_api_version,
        default_currency=settings.default_currency,
    )
    seed_pricing_plan(get_engine(settings.postgres_dsn), prices)


if __name__ == "__main__":
    main()
