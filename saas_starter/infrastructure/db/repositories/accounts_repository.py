from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import text

from saas_starter.application.ports.subscription_port import SubscriptionPort
from saas_starter.application.ports.tier_port import TierPort
from saas_starter.application.ports.user_port import UserPort
from saas_starter.domain.entities.subscription import RemoteSubscription
from saas_starter.domain.entities.tier import BASELINE_TIER_ID
from saas_starter.domain.exceptions import NotFoundError
from saas_starter.infrastructure.db.errors import translate_db_errors
from saas_starter.infrastructure.db.mappers.accounts_mapper import (
    map_row_to_billing_info,
    map_row_to_subscription,
    map_row_to_tier,
    map_row_to_tier_limit,
    map_row_to_user,
    map_row_to_user_subscription,
)


logger = logging.getLogger(__name__)

TAG = "accounts-repository"

_USER_COLUMNS = "id, email, name, customer_id, currency, tier_id, created_at, updated_at"
_SUBSCRIPTION_COLUMNS = """
    id, user_id, tier_id, price_id, item_id, status, current_period_start,
    current_period_end, cancel_at_period_end, created_at, updated_at
"""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SqlAccountsRepository(UserPort, SubscriptionPort, TierPort):
    def __init__(self, engine):
        self._engine = engine

    def get_user_by_id(self, *, user_id: str):
        sql = f"""
            SELECT {_USER_COLUMNS}
            FROM users
            WHERE id = :user_id
            LIMIT 1
        """
        with translate_db_errors("Unable to get user", metadata={"user_id": user_id}, tag=TAG):
            with self._engine.connect() as conn:
                row = conn.execute(text(sql), {"user_id": user_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def get_user_by_email(self, *, email: str):
        sql = f"""
            SELECT {_USER_COLUMNS}
            FROM users
            WHERE lower(email) = :email
            LIMIT 1
        """
        with translate_db_errors("Unable to get user", metadata={"email": email}, tag=TAG):
            with self._engine.connect() as conn:
                row = conn.execute(text(sql), {"email": email.lower()}).mappings().first()
        if row is None:
            return None
        return map_row_to_user(row)

    def create_user(
        self,
        *,
        user_id: str,
        email: str,
        name: str,
        customer_id: str,
        currency: str,
        tier_id: str,
    ):
        now = _utcnow()
        insert_sql = """
            INSERT INTO users (
                id, email, name, customer_id, currency, tier_id, created_at, updated_at
            ) VALUES (
                :id, :email, :name, :customer_id, :currency, :tier_id, :created_at, :updated_at
            )
        """
        params = {
            "id": user_id,
            "email": email,
            "name": name,
            "customer_id": customer_id,
            "currency": currency,
            "tier_id": tier_id,
            "created_at": now,
            "updated_at": now,
        }
        with translate_db_errors("Unable to create user", metadata={"user_id": user_id}, tag=TAG):
            with self._engine.begin() as conn:
                conn.execute(text(insert_sql), params)
                row = conn.execute(
                    text(f"SELECT {_USER_COLUMNS} FROM users WHERE id = :id"),
                    {"id": user_id},
                ).mappings().one()
        return map_row_to_user(row)

    def delete_user(self, *, user_id: str) -> None:
        with translate_db_errors("Unable to delete user", metadata={"user_id": user_id}, tag=TAG):
            with self._engine.begin() as conn:
                conn.execute(text("DELETE FROM notes WHERE user_id = :user_id"), {"user_id": user_id})
                conn.execute(text("DELETE FROM subscriptions WHERE user_id = :user_id"), {"user_id": user_id})
                result = conn.execute(text("DELETE FROM users WHERE id = :user_id"), {"user_id": user_id})
                if result.rowcount == 0:
                    raise NotFoundError("User not found", metadata={"user_id": user_id}, tag=TAG)

    def get_billing_info(self, *, user_id: str):
        sql = """
            SELECT customer_id, currency
            FROM users
            WHERE id = :user_id
            LIMIT 1
        """
        with translate_db_errors("Unable to get billing info", metadata={"user_id": user_id}, tag=TAG):
            with self._engine.connect() as conn:
                row = conn.execute(text(sql), {"user_id": user_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_billing_info(row)

    def get_user_tier(self, *, user_id: str):
        sql = """
            SELECT t.id, t.name, t.description, t.active, t.features_list
            FROM users u
            JOIN tiers t
              ON t.id = u.tier_id
            WHERE u.id = :user_id
            LIMIT 1
        """
        with translate_db_errors("Unable to get user tier", metadata={"user_id": user_id}, tag=TAG):
            with self._engine.connect() as conn:
                row = conn.execute(text(sql), {"user_id": user_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_tier(row)

    def get_user_tier_limit(self, *, user_id: str):
        sql = """
            SELECT l.tier_id, l.max_number_of_notes
            FROM users u
            JOIN tier_limits l
              ON l.tier_id = u.tier_id
            WHERE u.id = :user_id
            LIMIT 1
        """
        with translate_db_errors("Unable to get tier limit", metadata={"user_id": user_id}, tag=TAG):
            with self._engine.connect() as conn:
                row = conn.execute(text(sql), {"user_id": user_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_tier_limit(row)

    def get_user_subscription(self, *, user_id: str):
        sql = """
            SELECT
                s.id,
                s.tier_id,
                s.price_id,
                s.status,
                s.cancel_at_period_end,
                s.current_period_end,
                p.interval
            FROM subscriptions s
            JOIN prices p
              ON p.id = s.price_id
            WHERE s.user_id = :user_id
            LIMIT 1
        """
        with translate_db_errors("Unable to get subscription", metadata={"user_id": user_id}, tag=TAG):
            with self._engine.connect() as conn:
                row = conn.execute(text(sql), {"user_id": user_id}).mappings().first()
        if row is None:
            return None
        return map_row_to_user_subscription(row)

    def create_subscription(self, *, data: RemoteSubscription):
        with translate_db_errors("Unable to create subscription", metadata={"id": data.id}, tag=TAG):
            with self._engine.begin() as conn:
                user_id = self._user_id_for_customer(conn, customer_id=data.customer_id)
                conn.execute(
                    text(
                        """
                        UPDATE users
                        SET tier_id = :tier_id,
                            updated_at = :updated_at
                        WHERE id = :user_id
                        """
                    ),
                    {"tier_id": data.tier_id, "updated_at": _utcnow(), "user_id": user_id},
                )
                row = self._upsert_subscription(conn, user_id=user_id, data=data)
        logger.info("accounts_repository: subscription_created id=%s user_id=%s", data.id, user_id)
        return map_row_to_subscription(row)

    def update_subscription(self, *, data: RemoteSubscription):
        with translate_db_errors("Unable to update subscription", metadata={"id": data.id}, tag=TAG):
            with self._engine.begin() as conn:
                user_id = self._user_id_for_customer(conn, customer_id=data.customer_id)
                conn.execute(
                    text(
                        """
                        UPDATE users
                        SET tier_id = :tier_id,
                            currency = :currency,
                            updated_at = :updated_at
                        WHERE id = :user_id
                        """
                    ),
                    {
                        "tier_id": data.tier_id,
                        "currency": data.currency,
                        "updated_at": _utcnow(),
                        "user_id": user_id,
                    },
                )
                row = self._upsert_subscription(conn, user_id=user_id, data=data)
        logger.info("accounts_repository: subscription_updated id=%s user_id=%s", data.id, user_id)
        return map_row_to_subscription(row)

    def delete_subscription(self, *, subscription_id: str, customer_id: str) -> None:
        metadata = {"id": subscription_id, "customer_id": customer_id}
        with translate_db_errors("Unable to delete subscription", metadata=metadata, tag=TAG):
            with self._engine.begin() as conn:
                user_id = self._user_id_for_customer(conn, customer_id=customer_id)
                conn.execute(
                    text(
                        """
                        UPDATE users
                        SET tier_id = :tier_id,
                            updated_at = :updated_at
                        WHERE id = :user_id
                        """
                    ),
                    {"tier_id": BASELINE_TIER_ID, "updated_at": _utcnow(), "user_id": user_id},
                )
                result = conn.execute(
                    text("DELETE FROM subscriptions WHERE user_id = :user_id OR id = :id"),
                    {"user_id": user_id, "id": subscription_id},
                )
        logger.info(
            "accounts_repository: subscription_deleted id=%s user_id=%s rows=%s",
            subscription_id,
            user_id,
            result.rowcount,
        )

    def update_tier(
        self,
        *,
        tier_id: str,
        name: str,
        active: bool,
        description: str | None,
    ) -> datetime:
        now = _utcnow()
        sql = """
            UPDATE tiers
            SET name = :name,
                active = :active,
                description = :description,
                updated_at = :updated_at
            WHERE id = :tier_id
        """
        with translate_db_errors("Unable to update tier", metadata={"tier_id": tier_id}, tag=TAG):
            with self._engine.begin() as conn:
                result = conn.execute(
                    text(sql),
                    {
                        "name": name,
                        "active": active,
                        "description": description,
                        "updated_at": now,
                        "tier_id": tier_id,
                    },
                )
                if result.rowcount == 0:
                    raise NotFoundError("Tier not found", metadata={"tier_id": tier_id}, tag=TAG)
        return now

    def _user_id_for_customer(self, conn, *, customer_id: str) -> str:
        user_id = conn.execute(
            text("SELECT id FROM users WHERE customer_id = :customer_id LIMIT 1"),
            {"customer_id": customer_id},
        ).scalar()
        if user_id is None:
            raise NotFoundError(
                "No user found for this customer",
                metadata={"customer_id": customer_id},
                tag=TAG,
            )
        return str(user_id)

    def _upsert_subscription(self, conn, *, user_id: str, data: RemoteSubscription):
        now = _utcnow()
        # One subscription per user: a new id for the same user replaces the old row.
        conn.execute(
            text("DELETE FROM subscriptions WHERE user_id = :user_id AND id <> :id"),
            {"user_id": user_id, "id": data.id},
        )
        conn.execute(
            text(
                """
                INSERT INTO subscriptions (
                    id,
                    user_id,
                    tier_id,
                    price_id,
                    item_id,
                    status,
                    current_period_start,
                    current_period_end,
                    cancel_at_period_end,
                    created_at,
                    updated_at
                ) VALUES (
                    :id,
                    :user_id,
                    :tier_id,
                    :price_id,
                    :item_id,
                    :status,
                    :current_period_start,
                    :current_period_end,
                    :cancel_at_period_end,
                    :created_at,
                    :updated_at
                )
                ON CONFLICT (id) DO UPDATE
                SET user_id = excluded.user_id,
                    tier_id = excluded.tier_id,
                    price_id = excluded.price_id,
                    item_id = excluded.item_id,
                    status = excluded.status,
                    current_period_start = excluded.current_period_start,
                    current_period_end = excluded.current_period_end,
                    cancel_at_period_end = excluded.cancel_at_period_end,
                    updated_at = excluded.updated_at
                """
            ),
            {
                "id": data.id,
                "user_id": user_id,
                "tier_id": data.tier_id,
                "price_id": data.price_id,
                "item_id": data.item_id,
                "status": data.status,
                "current_period_start": data.current_period_start,
                "current_period_end": data.current_period_end,
                "cancel_at_period_end": data.cancel_at_period_end,
                "created_at": now,
                "updated_at": now,
            },
        )
        return conn.execute(
            text(f"SELECT {_SUBSCRIPTION_COLUMNS} FROM subscriptions WHERE id = :id"),
            {"id": data.id},
        ).mappings().one()
