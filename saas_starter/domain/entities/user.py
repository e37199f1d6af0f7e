from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .price import Currency
from .tier import TierId


@dataclass(frozen=True)
class User:
    id: str
    email: str
    name: str
    customer_id: str
    currency: Currency
    tier_id: TierId
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class BillingInfo:
    customer_id: str
    currency: Currency


@dataclass(frozen=True)
class AuthAccount:
    id: str
    created_at: datetime | None


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    refresh_token: str
    user_id: str
    email: str
    expires_in: int
    expires_at: int
