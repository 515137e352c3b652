"""
functions/orchestrator/tier_catalog.py

WHAT THIS FILE IS FOR
---------------------
This module owns the ordered tier catalog and the one-step resolver
over it.

- TierCatalog is immutable and built once at startup from settings
  (settings.tier_catalog), then passed to whoever needs it.
- next_tier() is pure and total over tier names: for any string it returns
  a TierStep. A direction other than up/down raises ValueError.

STEP RULES
----------
- Exact-match lookup of the current tier; unknown -> NOT_FOUND
- up   at the last index  -> AT_BOUNDARY, else the entry at index + 1
- down at the first index -> AT_BOUNDARY, else the entry at index - 1

NOT_FOUND and AT_BOUNDARY are distinct: the first is a client-correctable
input problem, the second is a successful no-op.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple


class ScaleDirection(str, Enum):
    UP = "up"
    DOWN = "down"


class StepKind(str, Enum):
    NEXT = "next"
    NOT_FOUND = "not_found"
    AT_BOUNDARY = "at_boundary"


@dataclass(frozen=True)
class TierStep:
    kind: StepKind
    tier: Optional[str] = None

    @property
    def is_next(self) -> bool:
        return self.kind is StepKind.NEXT


@dataclass(frozen=True)
class TierCatalog:
    """Ordered smallest -> largest. No duplicates, no blanks."""

    tiers: Tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.tiers:
            raise ValueError("Tier catalog must contain at least one tier")
        if any(not isinstance(t, str) or not t.strip() for t in self.tiers):
            raise ValueError("Tier catalog must not contain blank tier names")
        if len(set(self.tiers)) != len(self.tiers):
            raise ValueError("Tier catalog must not contain duplicate tiers")

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "TierCatalog":
        return cls(tuple(names))

    def __contains__(self, tier: object) -> bool:
        return tier in self.tiers

    def __len__(self) -> int:
        return len(self.tiers)

    def next_tier(self, current: str, direction: ScaleDirection | str) -> TierStep:
        # "sideways" and friends are a caller bug, not an unknown tier
        direction = ScaleDirection(direction)

        try:
            index = self.tiers.index(current)
        except ValueError:
            return TierStep(StepKind.NOT_FOUND)

        if direction is ScaleDirection.UP:
            if index == len(self.tiers) - 1:
                return TierStep(StepKind.AT_BOUNDARY)
            return TierStep(StepKind.NEXT, self.tiers[index + 1])

        if index == 0:
            return TierStep(StepKind.AT_BOUNDARY)
        return TierStep(StepKind.NEXT, self.tiers[index - 1])
