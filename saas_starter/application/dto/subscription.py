from __future__ import annotations

from dataclasses import dataclass

from saas_starter.domain.entities.subscription import UserSubscription
from saas_starter.domain.entities.tier import Tier


@dataclass(frozen=True)
class SubscriptionOverviewOutput:
    tier: Tier
    subscription: UserSubscription | None
