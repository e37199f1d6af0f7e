from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from .price import Currency, Interval
from .tier import TierId


SubscriptionStatus = Literal[
    "incomplete",
    "incomplete_expired",
    "trialing",
    "active",
    "past_due",
    "canceled",
    "unpaid",
    "paused",
]


@dataclass(frozen=True)
class Subscription:
    id: str
    user_id: str
    tier_id: TierId
    price_id: str
    item_id: str
    status: SubscriptionStatus
    current_period_start: datetime
    current_period_end: datetime
    cancel_at_period_end: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class RemoteSubscription:
    """Provider subscription mapped to the local shape."""

    id: str
    customer_id: str
    tier_id: TierId
    item_id: str
    price_id: str
    status: SubscriptionStatus
    currency: Currency
    current_period_start: datetime
    current_period_end: datetime
    cancel_at_period_end: bool


@dataclass(frozen=True)
class UserSubscription:
    id: str
    tier_id: TierId
    price_id: str
    status: SubscriptionStatus
    cancel_at_period_end: bool
    current_period_end: datetime
    interval: Interval
