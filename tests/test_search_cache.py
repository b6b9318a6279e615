# tests/test_search_cache.py

"""Tests for the bounded, TTL-limited search cache."""

import unittest

from showroom.models.vehicle import Vehicle
from showroom.storage.search_cache import (
    CacheEntry,
    SearchCache,
    derive_key,
)


class FakeClock:
    """Manually advanced clock (seconds)."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _v(vid: int, make: str = "BMW") -> Vehicle:
    """Create a minimal Vehicle for testing."""
    return Vehicle(id=vid, make=make, model="X5")


class TestDeriveKey(unittest.TestCase):
    """Canonical key derivation."""

    def test_key_order_does_not_matter(self) -> None:
        """Field-order permutations derive the same key."""
        a = {"make": "BMW", "page": 1, "yearFrom": 2018}
        b = {"yearFrom": 2018, "page": 1, "make": "BMW"}
        self.assertEqual(derive_key(a), derive_key(b))

    def test_unset_fields_are_ignored(self) -> None:
        """None and empty-string fields are stripped."""
        a = {"make": "BMW", "model": None, "page": 1}
        b = {"page": 1, "make": "BMW"}
        c = {"page": 1, "make": "BMW", "color": ""}
        self.assertEqual(derive_key(a), derive_key(b))
        self.assertEqual(derive_key(b), derive_key(c))

    def test_different_values_differ(self) -> None:
        """A different filter value yields a different key."""
        self.assertNotEqual(
            derive_key({"make": "BMW"}), derive_key({"make": "Audi"})
        )

    def test_zero_and_false_are_kept(self) -> None:
        """Falsy but meaningful values are part of the key."""
        self.assertNotEqual(derive_key({"page": 0}), derive_key({}))
        self.assertNotEqual(
            derive_key({"featured": False}), derive_key({})
        )

    def test_empty_descriptor(self) -> None:
        """An empty mapping serialises to an empty object."""
        self.assertEqual(derive_key({}), "{}")

    def test_non_json_values_do_not_raise(self) -> None:
        """Arbitrary values fall back to their string form."""
        key = derive_key({"since": object()})  # type: ignore[dict-item]
        self.assertIn("since", key)


class TestSearchCache(unittest.TestCase):
    """SearchCache unit tests."""

    def setUp(self) -> None:
        self.clock = FakeClock()
        self.cache = SearchCache(max_entries=3, ttl=10.0, clock=self.clock)

    # ── Store & retrieve ─────────────────────────────────

    def test_miss_returns_none(self) -> None:
        """Empty cache always misses."""
        self.assertIsNone(self.cache.get({"make": "BMW"}))

    def test_hit_returns_entry(self) -> None:
        """A stored page comes back with its total."""
        self.cache.set({"make": "BMW", "page": 1}, [_v(1), _v(2)], 40)
        entry = self.cache.get({"page": 1, "make": "BMW"})
        self.assertIsNotNone(entry)
        assert entry is not None
        self.assertIsInstance(entry, CacheEntry)
        self.assertEqual([v.id for v in entry.items], [1, 2])
        self.assertEqual(entry.total_count, 40)
        self.assertEqual(entry.created_at, 0.0)

    def test_equivalent_descriptor_hits(self) -> None:
        """Unset fields in the lookup do not cause a miss."""
        self.cache.set({"make": "BMW"}, [_v(1)], 1)
        self.assertIsNotNone(
            self.cache.get({"make": "BMW", "model": None, "color": ""})
        )

    def test_returns_copy_not_stored_entry(self) -> None:
        """Callers never hold the stored entry object."""
        self.cache.set({"make": "BMW"}, [_v(1)], 1)
        first = self.cache.get({"make": "BMW"})
        second = self.cache.get({"make": "BMW"})
        assert first is not None and second is not None
        self.assertIsNot(first, second)
        self.assertEqual(first, second)

    def test_stored_items_isolated_from_input_list(self) -> None:
        """Mutating the list passed to set() does not change the entry."""
        items = [_v(1)]
        self.cache.set({"make": "BMW"}, items, 1)
        items.append(_v(2))
        entry = self.cache.get({"make": "BMW"})
        assert entry is not None
        self.assertEqual(len(entry.items), 1)

    # ── TTL ──────────────────────────────────────────────

    def test_entry_fresh_just_before_ttl(self) -> None:
        """An entry is still served just before its TTL."""
        self.cache.set({"make": "BMW"}, [_v(1)], 1)
        self.clock.now = 9.999
        self.assertIsNotNone(self.cache.get({"make": "BMW"}))

    def test_entry_expires_at_ttl(self) -> None:
        """Age equal to the TTL is already expired."""
        self.cache.set({"make": "BMW"}, [_v(1)], 1)
        self.clock.now = 10.0
        self.assertIsNone(self.cache.get({"make": "BMW"}))

    def test_expired_lookup_purges_entry(self) -> None:
        """An expired get() removes the entry from the store."""
        self.cache.set({"make": "BMW"}, [_v(1)], 1)
        self.clock.now = 50.0
        self.assertEqual(len(self.cache), 1)
        self.assertIsNone(self.cache.get({"make": "BMW"}))
        self.assertEqual(len(self.cache), 0)

    def test_no_stale_data_after_expiry(self) -> None:
        """After expiry a second get still misses until a new set()."""
        self.cache.set({"make": "BMW"}, [_v(1)], 1)
        self.clock.now = 11.0
        self.assertIsNone(self.cache.get({"make": "BMW"}))
        self.assertIsNone(self.cache.get({"make": "BMW"}))
        self.cache.set({"make": "BMW"}, [_v(7)], 1)
        entry = self.cache.get({"make": "BMW"})
        assert entry is not None
        self.assertEqual(entry.items[0].id, 7)

    def test_clear_expired_removes_only_old(self) -> None:
        """clear_expired keeps entries that are still fresh."""
        self.cache.set({"make": "A"}, [_v(1)], 1)
        self.clock.now = 5.0
        self.cache.set({"make": "B"}, [_v(2)], 1)
        self.clock.now = 12.0
        removed = self.cache.clear_expired()
        self.assertEqual(removed, 1)
        self.assertIsNone(self.cache.get({"make": "A"}))
        self.assertIsNotNone(self.cache.get({"make": "B"}))

    def test_contains_is_freshness_aware(self) -> None:
        """``in`` reports expired entries as absent without purging."""
        self.cache.set({"make": "BMW"}, [_v(1)], 1)
        self.assertIn({"make": "BMW"}, self.cache)
        self.clock.now = 10.0
        self.assertNotIn({"make": "BMW"}, self.cache)
        self.assertEqual(len(self.cache), 1)

    # ── Capacity ─────────────────────────────────────────

    def test_capacity_evicts_oldest(self) -> None:
        """A full cache evicts its oldest entry."""
        for i in range(5):
            self.clock.now = float(i)
            self.cache.set({"page": i}, [_v(i)], 5)
            self.assertLessEqual(len(self.cache), 3)
        for i in (0, 1):
            self.assertIsNone(self.cache.get({"page": i}))
        for i in (2, 3, 4):
            self.assertIsNotNone(self.cache.get({"page": i}))

    def test_survivors_are_most_recent_by_created_at(self) -> None:
        """Updating a key refreshes it, so an untouched key goes first."""
        self.cache.set({"page": 1}, [_v(1)], 1)
        self.clock.now = 1.0
        self.cache.set({"page": 2}, [_v(2)], 1)
        self.clock.now = 2.0
        self.cache.set({"page": 3}, [_v(3)], 1)
        self.clock.now = 3.0
        self.cache.set({"page": 1}, [_v(10)], 1)
        self.clock.now = 4.0
        self.cache.set({"page": 4}, [_v(4)], 1)

        self.assertIsNone(self.cache.get({"page": 2}))
        self.assertEqual(
            sorted(self.cache.keys()),
            sorted(
                [
                    derive_key({"page": 1}),
                    derive_key({"page": 3}),
                    derive_key({"page": 4}),
                ]
            ),
        )

    def test_overwrite_at_capacity_evicts_nothing(self) -> None:
        """Re-setting an existing key when full is an update."""
        for i in range(3):
            self.clock.now = float(i)
            self.cache.set({"page": i}, [_v(i)], 3)
        self.clock.now = 5.0
        self.cache.set({"page": 0}, [_v(99)], 3)

        self.assertEqual(len(self.cache), 3)
        for i in range(3):
            self.assertIsNotNone(self.cache.get({"page": i}))
        entry = self.cache.get({"page": 0})
        assert entry is not None
        self.assertEqual(entry.items[0].id, 99)
        self.assertEqual(entry.created_at, 5.0)

    def test_scenario_two_entries_one_second_ttl(self) -> None:
        """N=2, TTL=1s: A@0, B@0.1, C@0.2 leaves exactly {B, C}."""
        clock = FakeClock()
        cache = SearchCache(max_entries=2, ttl=1.0, clock=clock)
        cache.set({"make": "A"}, [_v(1)], 1)
        clock.now = 0.1
        cache.set({"make": "B"}, [_v(2)], 1)
        clock.now = 0.2
        cache.set({"make": "C"}, [_v(3)], 1)

        self.assertEqual(len(cache), 2)
        self.assertIsNone(cache.get({"make": "A"}))
        self.assertIsNotNone(cache.get({"make": "B"}))
        self.assertIsNotNone(cache.get({"make": "C"}))

    # ── clear() ──────────────────────────────────────────

    def test_clear_returns_purged_count(self) -> None:
        """clear() reports how many entries it removed."""
        self.cache.set({"make": "A"}, [_v(1)], 1)
        self.cache.set({"make": "B"}, [_v(2)], 1)
        self.assertEqual(self.cache.clear(), 2)
        self.assertEqual(len(self.cache), 0)
        self.assertIsNone(self.cache.get({"make": "A"}))

    def test_clear_on_empty_cache_returns_zero(self) -> None:
        """Clearing an empty cache returns 0."""
        self.assertEqual(self.cache.clear(), 0)

    # ── Configuration ────────────────────────────────────

    def test_defaults_from_settings(self) -> None:
        """Capacity and TTL default to the settings."""
        cache = SearchCache()
        self.assertEqual(cache.max_entries, 50)
        self.assertEqual(cache.ttl, 300.0)

    def test_invalid_configuration_rejected(self) -> None:
        """Non-positive capacity or TTL raise ValueError."""
        with self.assertRaises(ValueError):
            SearchCache(max_entries=0)
        with self.assertRaises(ValueError):
            SearchCache(ttl=0)

    def test_separate_instances_are_isolated(self) -> None:
        """Two caches do not share entries."""
        other = SearchCache(clock=self.clock)
        self.cache.set({"make": "BMW"}, [_v(1)], 1)
        self.assertIsNone(other.get({"make": "BMW"}))


if __name__ == "__main__":
    unittest.main()
