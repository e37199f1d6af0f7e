from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Mapping

from saas_starter.domain.entities.note import Note
from saas_starter.domain.entities.price import ActivePrice
from saas_starter.domain.entities.subscription import Subscription, UserSubscription
from saas_starter.domain.entities.tier import Tier, TierLimit
from saas_starter.domain.entities.user import BillingInfo, User


def _as_str(value: Any) -> str:
    return str(value)


def _as_datetime(value: Any) -> datetime:
    # Drivers without native timestamps (sqlite) hand back ISO strings.
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = json.loads(value)
    return [str(item) for item in value]


def map_row_to_user(row: Mapping[str, Any]) -> User:
    return User(
        id=_as_str(row["id"]),
        email=row["email"],
        name=row["name"],
        customer_id=row["customer_id"],
        currency=row["currency"],
        tier_id=row["tier_id"],
        created_at=_as_datetime(row["created_at"]),
        updated_at=_as_datetime(row["updated_at"]),
    )


def map_row_to_billing_info(row: Mapping[str, Any]) -> BillingInfo:
    return BillingInfo(customer_id=row["customer_id"], currency=row["currency"])


def map_row_to_tier(row: Mapping[str, Any]) -> Tier:
    return Tier(
        id=row["id"],
        name=row["name"],
        description=row.get("description"),
        active=bool(row["active"]),
        features_list=_as_list(row.get("features_list")),
    )


def map_row_to_tier_limit(row: Mapping[str, Any]) -> TierLimit:
    max_number_of_notes = row.get("max_number_of_notes")
    return TierLimit(
        tier_id=row["tier_id"],
        max_number_of_notes=int(max_number_of_notes) if max_number_of_notes is not None else None,
    )


def map_row_to_subscription(row: Mapping[str, Any]) -> Subscription:
    return Subscription(
        id=_as_str(row["id"]),
        user_id=_as_str(row["user_id"]),
        tier_id=row["tier_id"],
        price_id=row["price_id"],
        item_id=row["item_id"],
        status=row["status"],
        current_period_start=_as_datetime(row["current_period_start"]),
        current_period_end=_as_datetime(row["current_period_end"]),
        cancel_at_period_end=bool(row["cancel_at_period_end"]),
        created_at=_as_datetime(row["created_at"]),
        updated_at=_as_datetime(row["updated_at"]),
    )


def map_row_to_user_subscription(row: Mapping[str, Any]) -> UserSubscription:
    return UserSubscription(
        id=_as_str(row["id"]),
        tier_id=row["tier_id"],
        price_id=row["price_id"],
        status=row["status"],
        cancel_at_period_end=bool(row["cancel_at_period_end"]),
        current_period_end=_as_datetime(row["current_period_end"]),
        interval=row["interval"],
    )


def map_row_to_note(row: Mapping[str, Any]) -> Note:
    return Note(
        id=_as_str(row["id"]),
        user_id=_as_str(row["user_id"]),
        content=row["content"],
        created_at=_as_datetime(row["created_at"]),
        updated_at=_as_datetime(row["updated_at"]),
    )


def map_row_to_active_price(row: Mapping[str, Any]) -> ActivePrice:
    amount = row.get("amount")
    return ActivePrice(
        price_id=row["price_id"],
        interval=row["interval"],
        tier_id=row["tier_id"],
        tier_name=row["tier_name"],
        tier_description=row.get("tier_description"),
        tier_features_list=_as_list(row.get("tier_features_list")),
        tier_active=bool(row["tier_active"]),
        amount=int(amount) if amount is not None else None,
    )
