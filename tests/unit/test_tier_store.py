"""
Unit tests for tier_store module.
"""

import pytest

from hypermind.config import TierPolicyConfig
from hypermind.tier_store import TierStore
from hypermind.types import ContextEntry, Tier


class TestStore:
    """Tests for TierStore.store."""

    def test_stores_in_hot_by_default(self, store):
        """Default tier is hot."""
        store.store("key1", {"data": "value1"})

        assert store.tier_keys(Tier.HOT) == ["key1"]
        entry = store.tier_entries("hot")["key1"]
        assert entry.key == "key1"
        assert entry.value == {"data": "value1"}

    def test_stores_in_specified_tier(self, store):
        """Explicit tier is honoured."""
        store.store("key1", {"data": "value1"}, tier="warm")

        assert "key1" in store.tier_entries(Tier.WARM)
        assert "key1" not in store.tier_entries(Tier.HOT)

    def test_creates_metadata(self, store, clock):
        """New entries start with zero accesses and default significance."""
        entry = store.store("key1", {"data": "value1"})

        assert isinstance(entry, ContextEntry)
        assert entry.created_at == clock.now
        assert entry.access_count == 0
        assert entry.last_accessed_at is None
        assert entry.significance == 1.0

    def test_custom_significance(self, store):
        entry = store.store("key1", "v", significance=0.25)
        assert entry.significance == 0.25

    def test_zero_significance_is_kept(self, store):
        entry = store.store("key1", "v", significance=0.0)
        assert entry.significance == 0.0

    def test_overwrites_same_tier(self, store):
        """Same key in the same tier is replaced."""
        store.store("key1", "first")
        store.store("key1", "second")

        assert store.tier_keys("hot") == ["key1"]
        assert store.retrieve("key1") == "second"

    def test_does_not_touch_other_tiers(self, store):
        """Storing into one tier leaves a copy in another tier alone."""
        store.store("key1", "cold copy", tier="cold")
        store.store("key1", "hot copy", tier="hot")

        assert store.tiers_containing("key1") == [Tier.HOT, Tier.COLD]
        assert store.retrieve("key1") == "hot copy"

    def test_invalid_tier_raises(self, store):
        with pytest.raises(ValueError, match="Invalid tier"):
            store.store("key1", "v", tier="lukewarm")
        assert len(store) == 0


class TestRetrieve:
    """Tests for TierStore.retrieve."""

    def test_finds_in_every_tier(self, store):
        store.store("key1", {"data": "hot"}, tier="hot")
        store.store("key2", {"data": "warm"}, tier="warm")
        store.store("key3", {"data": "cold"}, tier="cold")
        store.store("key4", {"data": "archived"}, tier="archived")

        assert store.retrieve("key1") == {"data": "hot"}
        assert store.retrieve("key2") == {"data": "warm"}
        assert store.retrieve("key3") == {"data": "cold"}
        assert store.retrieve("key4") == {"data": "archived"}

    def test_missing_returns_none(self, store):
        assert store.retrieve("nonexistent") is None

    def test_increments_access_count(self, store, clock):
        store.store("key1", {"data": "value1"})
        entry = store.tier_entries("hot")["key1"]

        store.retrieve("key1")
        assert entry.access_count == 1

        clock.advance(seconds=5)
        store.retrieve("key1")
        assert entry.access_count == 2
        assert entry.last_accessed_at == clock.now

    def test_falsy_values_are_found(self, store):
        """A stored 0 or empty dict is a hit, not a miss."""
        store.store("zero", 0)
        store.store("empty", {})

        assert store.retrieve("zero") == 0
        assert store.retrieve("empty") == {}
        assert store.stats().misses == 0

    def test_stats_track_hits_and_misses(self, store):
        store.store("key1", "v")
        store.retrieve("key1")
        store.retrieve("missing")

        stats = store.stats()
        assert stats.hits == 1
        assert stats.misses == 1
        assert stats.hit_rate == 0.5


class TestPromotion:
    """Tests for access-driven promotion."""

    def test_cold_to_warm_on_eleventh_access(self, store):
        """Promotion triggers when access count exceeds 10."""
        store.store("key1", {"data": "value1"}, tier="cold")

        for _ in range(10):
            store.retrieve("key1")
        assert store.tiers_containing("key1") == [Tier.COLD]

        store.retrieve("key1")
        assert store.tiers_containing("key1") == [Tier.WARM]

    def test_one_step_per_retrieval(self, store):
        """The twelfth access moves warm to hot, never cold to hot at once."""
        store.store("key1", {"data": "value1"}, tier="cold")

        for _ in range(11):
            store.retrieve("key1")
        assert store.tiers_containing("key1") == [Tier.WARM]

        store.retrieve("key1")
        assert store.tiers_containing("key1") == [Tier.HOT]

    def test_access_count_retained(self, store):
        store.store("key1", "v", tier="archived")
        for _ in range(11):
            store.retrieve("key1")

        entry, tier = store.get_entry("key1")
        assert tier == Tier.COLD
        assert entry.access_count == 11

    def test_hot_is_not_promoted(self, store):
        store.store("key1", "v")
        for _ in range(20):
            store.retrieve("key1")

        assert store.tiers_containing("key1") == [Tier.HOT]
        assert store.stats().promotions == 0

    def test_promote_if_eligible_below_threshold(self, store):
        store.store("key1", "v", tier="cold")
        assert store.promote_if_eligible("key1", "cold") is None

    def test_promote_if_eligible_missing_key(self, store):
        assert store.promote_if_eligible("missing", Tier.WARM) is None

    def test_promote_if_eligible_moves_entry(self, store):
        entry = store.store("key1", "v", tier="warm")
        entry.access_count = 11

        assert store.promote_if_eligible("key1", Tier.WARM) == Tier.HOT
        assert store.tier_entries("hot")["key1"] is entry

    def test_custom_threshold(self, clock):
        store = TierStore(policy=TierPolicyConfig(promotion_access_threshold=2), clock=clock)
        store.store("key1", "v", tier="cold")

        store.retrieve("key1")
        store.retrieve("key1")
        assert store.tiers_containing("key1") == [Tier.COLD]
        store.retrieve("key1")
        assert store.tiers_containing("key1") == [Tier.WARM]

    def test_transition_logged(self, store):
        store.store("key1", "v", tier="cold")
        for _ in range(11):
            store.retrieve("key1")

        [record] = store.transitions()
        assert record.key == "key1"
        assert record.from_tier == Tier.COLD
        assert record.to_tier == Tier.WARM
        assert record.reason == "promotion"


class TestMaintenance:
    """Tests for age-based demotion."""

    def test_old_rarely_used_hot_entry_demoted(self, store, clock):
        store.store("old", "old value")
        clock.advance(hours=25)

        assert store.maintain() == 1
        assert store.tiers_containing("old") == [Tier.WARM]
        assert store.stats().demotions == 1

    def test_store_triggers_maintenance(self, store, clock):
        store.store("old", "old value")
        clock.advance(hours=25)
        store.store("new", "new value")

        assert store.tier_keys("hot") == ["new"]
        assert store.tier_keys("warm") == ["old"]

    def test_young_entry_not_demoted(self, store, clock):
        store.store("key1", "v")
        clock.advance(hours=24)

        assert store.maintain() == 0
        assert store.tiers_containing("key1") == [Tier.HOT]

    def test_frequently_used_entry_not_demoted(self, store, clock):
        store.store("key1", "v")
        for _ in range(5):
            store.retrieve("key1")
        clock.advance(days=3)

        assert store.maintain() == 0
        assert store.tiers_containing("key1") == [Tier.HOT]

    def test_only_hot_is_demoted(self, store, clock):
        store.store("key1", "v", tier="warm")
        clock.advance(days=10)
        store.maintain()

        assert store.tiers_containing("key1") == [Tier.WARM]

    def test_demotion_logged(self, store, clock):
        store.store("key1", "v")
        clock.advance(hours=30)
        store.maintain()

        [record] = store.transitions()
        assert (record.from_tier, record.to_tier, record.reason) == (
            Tier.HOT,
            Tier.WARM,
            "demotion",
        )


class TestDeduplicate:
    """Tests for global value deduplication."""

    def test_keeps_first_occurrence(self, store):
        store.store("a", {"x": 1})
        store.store("b", {"x": 1})

        assert store.tier_keys("hot") == ["a"]
        assert store.retrieve("b") is None

    def test_dedup_across_tiers(self, store):
        """Hot is scanned first, so the hot copy survives."""
        store.store("cold_key", [1, 2, 3], tier="cold")
        store.store("hot_key", [1, 2, 3], tier="hot")

        assert "hot_key" in store
        assert "cold_key" not in store

    def test_key_order_irrelevant(self, store):
        store.store("a", {"x": 1, "y": 2})
        store.store("b", {"y": 2, "x": 1})

        assert len(store) == 1

    def test_archived_exempt(self, store):
        store.store("a", "same", tier="archived")
        store.store("b", "same", tier="archived")
        store.store("c", "same", tier="hot")

        assert store.tier_keys("archived") == ["a", "b"]
        assert store.tier_keys("hot") == ["c"]

    def test_distinct_values_kept(self, store):
        store.store("a", {"x": 1})
        store.store("b", {"x": 2})
        store.store("c", "1")
        store.store("d", 1)

        assert len(store) == 4

    def test_returns_removed(self, store):
        store.store("a", "v", tier="warm")
        # Bypass the maintenance pass to set up a duplicate
        store._tiers[Tier.COLD]["b"] = ContextEntry(key="b", value="v")

        assert store.deduplicate() == [(Tier.COLD, "b")]
        assert store.stats().dedup_removals == 1


class TestSearchChronological:
    """Tests for key substring search."""

    def test_matches_substring(self, store):
        store.store("test1", {"data": "value1"})
        store.store("test2", {"data": "value2"})
        store.store("other", {"data": "value3"})

        results = store.search_chronological("test")

        assert [hit.key for hit in results] == ["test1", "test2"]
        assert all("test" in hit.key for hit in results)

    def test_most_recent_first(self, store, clock):
        store.store("item_old", "a", tier="cold")
        clock.advance(minutes=1)
        store.store("item_mid", "b", tier="archived")
        clock.advance(minutes=1)
        store.store("item_new", "c", tier="warm")

        results = store.search_chronological("item")

        assert [hit.key for hit in results] == ["item_new", "item_mid", "item_old"]
        assert [hit.tier for hit in results] == [Tier.WARM, Tier.ARCHIVED, Tier.COLD]

    def test_tie_broken_by_key(self, store):
        store.store("k_b", 1)
        store.store("k_a", 2)

        assert [hit.key for hit in store.search_chronological("k_")] == ["k_a", "k_b"]

    def test_hit_carries_entry(self, store):
        store.store("key1", "v", tier="cold")
        [hit] = store.search_chronological("key")

        assert hit.entry is not None
        assert hit.entry.value == "v"
        assert hit.metadata == {}

    def test_does_not_record_access(self, store):
        store.store("key1", "v")
        store.search_chronological("key")

        assert store.tier_entries("hot")["key1"].access_count == 0

    def test_no_match(self, store):
        store.store("key1", "v")
        assert store.search_chronological("zzz") == []


class TestInspection:
    """Tests for inspection helpers."""

    def test_get_entry_does_not_touch(self, store):
        store.store("key1", "v", tier="cold")
        entry, tier = store.get_entry("key1")

        assert tier == Tier.COLD
        assert entry.access_count == 0

    def test_get_entry_missing(self, store):
        assert store.get_entry("missing") is None

    def test_stats_entries_per_tier(self, store):
        store.store("a", 1)
        store.store("b", 2, tier="cold")
        store.store("c", 3, tier="archived")

        stats = store.stats()
        assert stats.entries_per_tier == {"hot": 1, "warm": 0, "cold": 1, "archived": 1}
        assert stats.total_entries == 3

    def test_clear(self, store):
        store.store("a", 1)
        store.retrieve("a")
        store.clear()

        assert len(store) == 0
        assert store.stats().hits == 0
        assert store.transitions() == []


class TestTierOrder:
    """Tests for Tier stepping."""

    def test_promote_steps_up(self):
        assert Tier.ARCHIVED.promote() is Tier.COLD
        assert Tier.WARM.promote() is Tier.HOT
        assert Tier.HOT.promote() is None

    def test_demote_steps_down(self):
        assert Tier.HOT.demote() is Tier.WARM
        assert Tier.COLD.demote() is Tier.ARCHIVED
        assert Tier.ARCHIVED.demote() is None


class TestDedupPolicy:
    """Tests for the configured dedup tiers."""

    def test_archived_rejected(self, clock):
        with pytest.raises(ValueError, match="Archived tier"):
            TierStore(policy=TierPolicyConfig(dedup_tiers=["hot", "archived"]), clock=clock)

    def test_unknown_tier_rejected(self, clock):
        with pytest.raises(ValueError, match="Invalid tier"):
            TierStore(policy=TierPolicyConfig(dedup_tiers=["lukewarm"]), clock=clock)

    def test_subset_only_dedups_listed_tiers(self, clock):
        store = TierStore(policy=TierPolicyConfig(dedup_tiers=["hot"]), clock=clock)
        store.store("a", "same", tier="cold")
        store.store("b", "same", tier="cold")

        assert store.tier_keys("cold") == ["a", "b"]


class TestUnusualValues:
    """Values json cannot encode directly are still stored and deduplicated."""

    def test_mixed_key_dict(self, store):
        store.store("k1", {1: "a", "b": 2})

        assert store.retrieve("k1") == {1: "a", "b": 2}

    def test_mixed_key_dicts_dedup(self, store):
        store.store("k1", {1: "a", "b": 2})
        store.store("k2", {"b": 2, 1: "a"})

        assert store.tier_keys("hot") == ["k1"]

    def test_tuple_key_does_not_poison_later_stores(self, store):
        store.store("bad", {(1, 2): "x"})
        store.store("good", "v")

        assert store.tier_keys("hot") == ["bad", "good"]
        assert store.retrieve("good") == "v"

    def test_cyclic_value(self, store):
        value: dict = {"name": "loop"}
        value["self"] = value
        store.store("k1", value)
        store.store("k2", "other")

        assert store.retrieve("k1") is value
        assert len(store) == 2
