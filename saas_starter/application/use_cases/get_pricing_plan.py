from __future__ import annotations

from typing import get_args

from saas_starter.application.ports.pricing_port import PricingPort
from saas_starter.domain.entities.price import Currency, PricingPlanEntry
from saas_starter.domain.exceptions import AppError, InternalError, ValidationError
from saas_starter.shared.result import Result, failure, success


TAG = "pricing-service"

SUPPORTED_CURRENCIES: tuple[str, ...] = get_args(Currency)


class GetPricingPlanUseCase:
    """List the active prices of active tiers with their amount in one currency.

    Every active price must define an amount for the requested currency; a
    missing amount means the catalog is inconsistent and the whole plan is
    refused rather than rendered with a hole in it.
    """

    def __init__(self, *, pricing_port: PricingPort):
        self._pricing_port = pricing_port

    def execute(self, *, currency: str) -> Result[list[PricingPlanEntry]]:
        if currency not in SUPPORTED_CURRENCIES:
            return failure(
                ValidationError(
                    "Unsupported currency",
                    metadata={"currency": currency, "supported": list(SUPPORTED_CURRENCIES)},
                    tag=TAG,
                )
            )

        try:
            prices = self._pricing_port.list_active_prices(currency=currency)
        except AppError as exc:
            return failure(
                InternalError(
                    "Unable to get pricing plan",
                    cause=exc,
                    metadata={"currency": currency},
                    tag=TAG,
                )
            )

        entries: list[PricingPlanEntry] = []
        for price in prices:
            if price.amount is None:
                return failure(
                    InternalError(
                        "Price has no amount in this currency",
                        metadata={"price_id": price.price_id, "currency": currency},
                        tag=TAG,
                    )
                )
            entries.append(
                PricingPlanEntry(
                    price_id=price.price_id,
                    interval=price.interval,
                    tier_id=price.tier_id,
                    name=price.tier_name,
                    description=price.tier_description,
                    features_list=list(price.tier_features_list),
                    active=price.tier_active,
                    currency=currency,
                    amount=price.amount,
                )
            )
        return success(entries)
