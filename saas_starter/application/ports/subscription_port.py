from __future__ import annotations

from typing import Protocol

from saas_starter.domain.entities.subscription import RemoteSubscription, Subscription, UserSubscription


class SubscriptionPort(Protocol):
    def get_user_subscription(self, *, user_id: str) -> UserSubscription | None:
        ...

    def create_subscription(self, *, data: RemoteSubscription) -> Subscription:
        """Set the user's tier and insert the subscription in one transaction."""
        ...

    def update_subscription(self, *, data: RemoteSubscription) -> Subscription:
        """Set the user's tier/currency and update the subscription in one transaction."""
        ...

    def delete_subscription(self, *, subscription_id: str, customer_id: str) -> None:
        """Reset the user's tier to the baseline and delete the subscription in one transaction."""
        ...
