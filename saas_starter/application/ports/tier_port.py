from __future__ import annotations

from datetime import datetime
from typing import Protocol


class TierPort(Protocol):
    def update_tier(
        self,
        *,
        tier_id: str,
        name: str,
        active: bool,
        description: str | None,
    ) -> datetime:
        ...
