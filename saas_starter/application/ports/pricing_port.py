from __future__ import annotations

from typing import Protocol

from saas_starter.domain.entities.price import ActivePrice


class PricingPort(Protocol):
    def list_active_prices(self, *, currency: str) -> list[ActivePrice]:
        ...
