"""
Tiered context store with access-driven promotion.

Entries live in exactly one of four tiers (hot, warm, cold, archived).
Moving between tiers transfers the entry object; it is never copied.

Usage:
    from hypermind.tier_store import TierStore

    store = TierStore()
    store.store("k1", {"a": 1}, tier="cold")
    store.retrieve("k1")
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime
from typing import Any

from .canonical import canonicalize
from .config import TierPolicyConfig
from .types import (
    SCAN_ORDER,
    ContextEntry,
    SearchHit,
    StoreStats,
    Tier,
    TransitionRecord,
    utc_now,
)

logger = logging.getLogger(__name__)


class TierStore:
    """
    Four-tier key/value store.

    Keys are unique within a tier. Every public method holds the store lock
    for its whole duration.
    """

    def __init__(
        self,
        policy: TierPolicyConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the store.

        Args:
            policy: Promotion, demotion and dedup thresholds
            clock: Source of the current time (aware datetimes)

        Raises:
            ValueError: If the dedup tiers include an unknown tier or archived
        """
        self.policy = policy or TierPolicyConfig()
        self._clock = clock
        self._dedup_tiers = tuple(Tier.parse(t) for t in self.policy.dedup_tiers)
        if Tier.ARCHIVED in self._dedup_tiers:
            raise ValueError("Archived tier cannot take part in deduplication")

        self._tiers: dict[Tier, dict[str, ContextEntry]] = {tier: {} for tier in SCAN_ORDER}
        self._transitions: list[TransitionRecord] = []
        self._stats = StoreStats()
        self._lock = threading.RLock()

    # -------------------------------------------------------------------------
    # Public operations
    # -------------------------------------------------------------------------

    def store(
        self,
        key: str,
        value: Any,
        tier: Tier | str = Tier.HOT,
        significance: float | None = None,
    ) -> ContextEntry:
        """
        Insert a new entry, then run a maintenance pass.

        Overwrites an entry with the same key in the target tier only. Copies
        of the key in other tiers are left in place.

        Args:
            key: Context key
            value: Opaque value
            tier: Target tier (default hot)
            significance: Entry significance (default 1.0)

        Returns:
            The created entry. It may already have been demoted or
            deduplicated away by the maintenance pass.
        """
        target = Tier.parse(tier)
        with self._lock:
            entry = ContextEntry(
                key=key,
                value=value,
                created_at=self._clock(),
                significance=1.0 if significance is None else significance,
            )
            self._tiers[target][key] = entry
            logger.debug("Stored %r in %s tier", key, target.value)
            self.maintain()
            return entry

    def retrieve(self, key: str) -> Any | None:
        """
        Return the value stored under key, or None if no tier holds it.

        Scans hot, warm, cold, archived. The first match has its access
        metadata updated and may be promoted one tier.
        """
        with self._lock:
            for tier in SCAN_ORDER:
                entry = self._tiers[tier].get(key)
                if entry is None:
                    continue
                value = entry.touch(self._clock())
                self._stats.hits += 1
                self.promote_if_eligible(key, tier)
                return value

            self._stats.misses += 1
            return None

    def search_chronological(self, term: str) -> list[SearchHit]:
        """
        Find entries whose key contains term, most recent first.

        Ties on creation time are broken by key, then by tier scan order.
        """
        with self._lock:
            matches = [
                (entry, tier)
                for tier in SCAN_ORDER
                for key, entry in self._tiers[tier].items()
                if term in key
            ]

        scan_index = {tier: i for i, tier in enumerate(SCAN_ORDER)}
        matches.sort(key=lambda m: (m[0].key, scan_index[m[1]]))
        matches.sort(key=lambda m: m[0].created_at, reverse=True)
        return [SearchHit(key=entry.key, value=entry, tier=tier) for entry, tier in matches]

    def maintain(self) -> int:
        """
        Demote stale, rarely used hot entries to warm, then deduplicate.

        Returns:
            Number of entries demoted
        """
        with self._lock:
            now = self._clock()
            stale = [
                key
                for key, entry in self._tiers[Tier.HOT].items()
                if entry.age_hours(now) > self.policy.demotion_age_hours
                and entry.access_count < self.policy.demotion_max_access_count
            ]
            for key in stale:
                self._move(key, Tier.HOT, Tier.HOT.demote(), reason="demotion")
                self._stats.demotions += 1

            self.deduplicate()
            return len(stale)

    def deduplicate(self) -> list[tuple[Tier, str]]:
        """
        Remove entries whose value duplicates an earlier one.

        Scans the dedup tiers in order (hot, warm, cold by default) and keeps
        the first entry seen for each canonical value. Archived entries are
        never touched.

        Returns:
            (tier, key) of every removed entry
        """
        with self._lock:
            seen: set[str] = set()
            removed: list[tuple[Tier, str]] = []
            for tier in self._dedup_tiers:
                bucket = self._tiers[tier]
                for key, entry in list(bucket.items()):
                    canonical = canonicalize(entry.value)
                    if canonical in seen:
                        del bucket[key]
                        removed.append((tier, key))
                    else:
                        seen.add(canonical)

            if removed:
                self._stats.dedup_removals += len(removed)
                logger.debug("Deduplicated %d entries: %s", len(removed), removed)
            return removed

    def promote_if_eligible(self, key: str, from_tier: Tier | str) -> Tier | None:
        """
        Move an entry one tier toward hot if it has been accessed often enough.

        Access count is retained. At most one step per call.

        Returns:
            The new tier, or None if the entry was not promoted
        """
        source = Tier.parse(from_tier)
        with self._lock:
            entry = self._tiers[source].get(key)
            if entry is None:
                return None

            target = source.promote()
            if target is None or entry.access_count <= self.policy.promotion_access_threshold:
                return None

            self._move(key, source, target, reason="promotion")
            self._stats.promotions += 1
            return target

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    def get_entry(self, key: str) -> tuple[ContextEntry, Tier] | None:
        """Locate an entry without recording an access."""
        with self._lock:
            for tier in SCAN_ORDER:
                entry = self._tiers[tier].get(key)
                if entry is not None:
                    return entry, tier
            return None

    def tiers_containing(self, key: str) -> list[Tier]:
        """Every tier currently holding key."""
        with self._lock:
            return [tier for tier in SCAN_ORDER if key in self._tiers[tier]]

    def tier_keys(self, tier: Tier | str) -> list[str]:
        """Keys held by a tier, in insertion order."""
        with self._lock:
            return list(self._tiers[Tier.parse(tier)])

    def tier_entries(self, tier: Tier | str) -> dict[str, ContextEntry]:
        """Shallow snapshot of a tier."""
        with self._lock:
            return dict(self._tiers[Tier.parse(tier)])

    def transitions(self) -> list[TransitionRecord]:
        """Log of every promotion and demotion, oldest first."""
        with self._lock:
            return list(self._transitions)

    def stats(self) -> StoreStats:
        """Snapshot of store counters."""
        with self._lock:
            return StoreStats(
                hits=self._stats.hits,
                misses=self._stats.misses,
                promotions=self._stats.promotions,
                demotions=self._stats.demotions,
                dedup_removals=self._stats.dedup_removals,
                entries_per_tier={tier.value: len(self._tiers[tier]) for tier in SCAN_ORDER},
            )

    def clear(self) -> None:
        """Drop all entries, transitions and counters."""
        with self._lock:
            for bucket in self._tiers.values():
                bucket.clear()
            self._transitions.clear()
            self._stats = StoreStats()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return any(key in self._tiers[tier] for tier in SCAN_ORDER)

    def __len__(self) -> int:
        with self._lock:
            return sum(len(bucket) for bucket in self._tiers.values())

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _move(self, key: str, source: Tier, target: Tier, reason: str) -> None:
        """Transfer an entry between tiers. Caller holds the lock."""
        entry = self._tiers[source].pop(key)
        self._tiers[target][key] = entry
        self._transitions.append(
            TransitionRecord(
                key=key,
                from_tier=source,
                to_tier=target,
                reason=reason,
                timestamp=self._clock(),
            )
        )
        logger.debug("%s %r: %s -> %s", reason.capitalize(), key, source.value, target.value)


__all__ = ["TierStore"]
