from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


Currency = Literal["usd", "eur"]
Interval = Literal["month", "year"]


@dataclass(frozen=True)
class PricingPlanEntry:
    price_id: str
    interval: Interval
    tier_id: str
    name: str
    description: str | None
    features_list: list[str]
    active: bool
    currency: Currency
    amount: int


@dataclass(frozen=True)
class ActivePrice:
    """Active price with its tier and, when defined, the amount in one currency."""

    price_id: str
    interval: Interval
    tier_id: str
    tier_name: str
    tier_description: str | None
    tier_features_list: list[str]
    tier_active: bool
    amount: int | None
