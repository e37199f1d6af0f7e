from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


TierId = Literal["free", "tier_1", "tier_2"]

BASELINE_TIER_ID: TierId = "free"


@dataclass(frozen=True)
class TierLimit:
    tier_id: TierId
    max_number_of_notes: int | None


@dataclass(frozen=True)
class Tier:
    id: TierId
    name: str
    description: str | None
    active: bool
    features_list: list[str] = field(default_factory=list)
