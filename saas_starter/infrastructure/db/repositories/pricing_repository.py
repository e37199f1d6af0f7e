from __future__ import annotations

from sqlalchemy import text

from saas_starter.application.ports.pricing_port import PricingPort
from saas_starter.infrastructure.db.errors import translate_db_errors
from saas_starter.infrastructure.db.mappers.accounts_mapper import map_row_to_active_price


class SqlPricingRepository(PricingPort):
    def __init__(self, engine):
        self._engine = engine

    def list_active_prices(self, *, currency: str):
        sql = """
            SELECT
                p.id AS price_id,
                p.interval,
                t.id AS tier_id,
                t.name AS tier_name,
                t.description AS tier_description,
                t.features_list AS tier_features_list,
                t.active AS tier_active,
                pc.amount
            FROM prices p
            JOIN tiers t
              ON t.id = p.tier_id
            LEFT JOIN price_currencies pc
              ON pc.price_id = p.id
             AND pc.currency = :currency
            WHERE p.active = :active
            ORDER BY t.id, p.interval
        """
        with translate_db_errors("Unable to get pricing plan", metadata={"currency": currency}, tag="pricing-repository"):
            with self._engine.connect() as conn:
                rows = conn.execute(text(sql), {"currency": currency, "active": True}).mappings().all()
        return [map_row_to_active_price(row) for row in rows]
