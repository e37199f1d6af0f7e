from __future__ import annotations

from typing import Protocol

from saas_starter.domain.entities.tier import Tier, TierLimit
from saas_starter.domain.entities.user import BillingInfo, User


class UserPort(Protocol):
    def get_user_by_id(self, *, user_id: str) -> User | None:
        ...

    def get_user_by_email(self, *, email: str) -> User | None:
        ...

    def create_user(
        self,
        *,
        user_id: str,
        email: str,
        name: str,
        customer_id: str,
        currency: str,
        tier_id: str,
    ) -> User:
        ...

    def delete_user(self, *, user_id: str) -> None:
        ...

    def get_billing_info(self, *, user_id: str) -> BillingInfo | None:
        ...

    def get_user_tier(self, *, user_id: str) -> Tier | None:
        ...

    def get_user_tier_limit(self, *, user_id: str) -> TierLimit | None:
        ...
