"""
Core data types for the HyperMind context store.

Tiers, context entries, scope frames and the records produced by the
context graph and the search router.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


def utc_now() -> datetime:
    """Default clock for every component."""
    return datetime.now(UTC)


class Tier(str, Enum):
    """
    Storage tier of a context entry.

    Ordered for promotion as ``archived < cold < warm < hot``.
    """

    HOT = "hot"
    WARM = "warm"
    COLD = "cold"
    ARCHIVED = "archived"

    @property
    def rank(self) -> int:
        return _TIER_RANK[self]

    def promote(self) -> Tier | None:
        """Next tier toward hot, or None if already hot."""
        return _PROMOTION_ORDER[self.rank + 1] if self is not Tier.HOT else None

    def demote(self) -> Tier | None:
        """Next tier toward archived, or None if already archived."""
        return _PROMOTION_ORDER[self.rank - 1] if self is not Tier.ARCHIVED else None

    @classmethod
    def parse(cls, value: Tier | str) -> Tier:
        """Accept a Tier or its string value."""
        if isinstance(value, Tier):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(t.value for t in cls)
            raise ValueError(f"Invalid tier: {value!r}. Must be one of: {valid}") from None


_PROMOTION_ORDER: tuple[Tier, ...] = (Tier.ARCHIVED, Tier.COLD, Tier.WARM, Tier.HOT)
_TIER_RANK: dict[Tier, int] = {tier: i for i, tier in enumerate(_PROMOTION_ORDER)}

# Order in which retrieval and search scan the tiers
SCAN_ORDER: tuple[Tier, ...] = (Tier.HOT, Tier.WARM, Tier.COLD, Tier.ARCHIVED)


@dataclass
class ContextEntry:
    """A stored context value with access metadata."""

    key: str
    value: Any
    created_at: datetime = field(default_factory=utc_now)
    access_count: int = 0
    last_accessed_at: datetime | None = None
    significance: float = 1.0

    def touch(self, now: datetime) -> Any:
        """Record an access and return the value."""
        self.access_count += 1
        self.last_accessed_at = now
        return self.value

    def age_hours(self, now: datetime) -> float:
        return (now - self.created_at).total_seconds() / 3600.0


@dataclass
class ScopeFrame:
    """
    One entry of the scope stack.

    ``parent_id`` is the id of the frame that was on top when this one was
    pushed. It is fixed at creation.
    """

    id: str
    config: dict[str, Any]
    created_at: datetime = field(default_factory=utc_now)
    parent_id: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "id": self.id,
            "config": dict(self.config),
            "created_at": self.created_at.isoformat(),
            "parent_id": self.parent_id,
            "context": dict(self.context),
        }


@dataclass(frozen=True)
class GraphNode:
    """Node of the context graph: a snapshot of a pushed scope frame."""

    id: str
    data: dict[str, Any]
    type: str = "scope"


@dataclass(frozen=True)
class GraphEdge:
    """Directed parent -> child edge."""

    source: str
    target: str
    type: str = "parent-child"


@dataclass
class SearchHit:
    """
    Normalized search result.

    Chronological hits carry the ContextEntry as ``value`` and the tier it
    was found in. Graph hits carry node data and no tier.
    """

    key: str
    value: Any
    tier: Tier | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def entry(self) -> ContextEntry | None:
        return self.value if isinstance(self.value, ContextEntry) else None


@dataclass(frozen=True)
class ScopeDescriptor:
    """Descriptor of a logical scope handed in by the scope selector."""

    id: str
    type: str
    is_global: bool = False
    is_org: bool = False
    is_project: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "is_global": self.is_global,
            "is_org": self.is_org,
            "is_project": self.is_project,
        }


@dataclass(frozen=True)
class TransitionRecord:
    """Entry in the tier transition log."""

    key: str
    from_tier: Tier
    to_tier: Tier
    reason: str  # "promotion" or "demotion"
    timestamp: datetime


@dataclass
class StoreStats:
    """Counters describing store activity."""

    hits: int = 0
    misses: int = 0
    promotions: int = 0
    demotions: int = 0
    dedup_removals: int = 0
    entries_per_tier: dict[str, int] = field(default_factory=dict)

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    @property
    def total_entries(self) -> int:
        return sum(self.entries_per_tier.values())


__all__ = [
    "SCAN_ORDER",
    "ContextEntry",
    "GraphEdge",
    "GraphNode",
    "ScopeDescriptor",
    "ScopeFrame",
    "SearchHit",
    "StoreStats",
    "Tier",
    "TransitionRecord",
    "utc_now",
]
