from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class CreateCheckoutSessionInput:
    user_id: str
    price_id: str


@dataclass(frozen=True)
class RedirectUrlOutput:
    url: str


@dataclass(frozen=True)
class StripeWebhookInput:
    signature: str | None
    payload: bytes


@dataclass(frozen=True)
class StripeWebhookOutput:
    event_id: str | None
    event_type: str
    handled: bool
    data: dict | None


@dataclass(frozen=True)
class StripeEvent:
    id: str
    type: str
    data_object: dict[str, Any]


@dataclass(frozen=True)
class CreatedSubscriptionOutput:
    id: str
    user_id: str
    created_at: datetime


@dataclass(frozen=True)
class UpdatedSubscriptionOutput:
    id: str
    user_id: str
    updated_at: datetime


@dataclass(frozen=True)
class DeletedSubscriptionOutput:
    id: str
    deleted: bool


@dataclass(frozen=True)
class UpdatedTierOutput:
    id: str
    updated_at: datetime


@dataclass(frozen=True)
class UpdateTierMetadataInput:
    tier_id: str
    name: str
    active: bool
    description: str | None
