"""Tests for the in-memory TTL cache store."""

from __future__ import annotations

import threading
from datetime import timedelta

import pytest

from awstui.cache import CacheStore


def test_get_returns_value_right_after_set(store):
    store.set("dev:s3:buckets", ["a", "b"], 60)

    assert store.get("dev:s3:buckets") == (["a", "b"], True)


def test_get_missing_key_is_a_miss(store):
    assert store.get("nope") == (None, False)


@pytest.mark.parametrize("ttl", [0, -1, -3600, timedelta(seconds=-5)])
def test_non_positive_ttl_is_immediately_invisible(store, ttl):
    store.set("k", "v", ttl)

    assert store.get("k") == (None, False)
    # still physically present until swept
    assert store.size() == 1


def test_timedelta_ttl(store, clock):
    store.set("k", "v", timedelta(minutes=2))

    clock.advance(119)
    assert store.get("k") == ("v", True)
    clock.advance(1)
    assert store.get("k") == (None, False)


def test_entry_expires_exactly_at_ttl(store, clock):
    store.set("k", "v", 30)

    clock.advance(29)
    assert store.get("k") == ("v", True)

    clock.advance(1)
    assert store.get("k") == (None, False)


def test_expired_entry_is_a_miss_with_or_without_sweep(store, clock):
    store.set("a", 1, 10)
    store.set("b", 2, 10)
    clock.advance(11)

    assert store.get("a") == (None, False)
    store.clean_expired()
    assert store.get("b") == (None, False)


def test_get_does_not_delete_expired_entries(store, clock):
    store.set("k", "v", 5)
    clock.advance(10)

    store.get("k")

    assert len(store) == 1


def test_set_overwrites_value_and_expiry(store, clock):
    store.set("k", "old", 5)
    clock.advance(4)
    store.set("k", "new", 60)
    clock.advance(10)

    assert store.get("k") == ("new", True)


def test_delete_is_idempotent(store):
    store.set("k", "v", 60)

    store.delete("k")
    store.delete("k")
    store.delete("never-set")

    assert store.get("k") == (None, False)
    assert store.get("never-set") == (None, False)


def test_delete_prefix_removes_only_matching_keys(store):
    store.set("dev:s3:buckets", [1], 60)
    store.set("dev:s3:bucket:logs:prefix:", [2], 60)
    store.set("dev:iam:users", [3], 60)
    store.set("prod:s3:buckets", [4], 60)

    removed = store.delete_prefix("dev:s3:")

    assert removed == 2
    assert store.get("dev:s3:buckets") == (None, False)
    assert store.get("dev:s3:bucket:logs:prefix:") == (None, False)
    assert store.get("dev:iam:users") == ([3], True)
    assert store.get("prod:s3:buckets") == ([4], True)


def test_delete_prefix_twice_equals_once(store):
    store.set("dev:s3:buckets", [1], 60)
    store.set("dev:iam:users", [2], 60)

    assert store.delete_prefix("dev:s3:") == 1
    assert store.delete_prefix("dev:s3:") == 0
    assert store.get("dev:iam:users") == ([2], True)
    assert store.size() == 1


def test_delete_prefix_with_separator_does_not_over_match(store):
    store.set("acct1:s3:buckets", [1], 60)
    store.set("acct1:s3x:things", [2], 60)

    store.delete_prefix("acct1:s3:")

    assert store.get("acct1:s3x:things") == ([2], True)


def test_clean_expired_keeps_live_entries(store, clock):
    store.set("short", 1, 5)
    store.set("long", 2, 500)
    store.set("dead", 3, 0)
    clock.advance(6)
    before = {k: store.get(k) for k in ("short", "long", "dead")}

    removed = store.clean_expired()

    assert removed == 2
    assert store.size() == 1
    assert {k: store.get(k) for k in ("short", "long", "dead")} == before


def test_clear(store):
    store.set("a", 1, 60)
    store.set("b", 2, 60)

    store.clear()

    assert store.size() == 0


def test_get_age(store, clock):
    store.set("k", "v", 60)
    clock.advance(12)

    assert store.get_age("k") == (12, True)
    assert store.get_age("missing") == (0.0, False)

    clock.advance(60)
    assert store.get_age("k") == (0.0, False)


def test_stats_counts_expired_entries(store, clock):
    store.set("live", 1, 60)
    store.set("dead", 2, 1)
    clock.advance(2)

    assert store.stats() == {"entries": 2, "live": 1, "expired": 1}


def test_uses_monotonic_clock_by_default():
    store = CacheStore()
    store.set("k", "v", 60)

    assert store.get("k") == ("v", True)


def test_end_to_end_prefix_invalidation(store):
    store.set("acct1:s3:buckets", ["bucketA", "bucketB"], 60)
    store.set("acct1:iam:users", ["alice"], 60)

    assert store.get("acct1:s3:buckets") == (["bucketA", "bucketB"], True)

    store.delete_prefix("acct1:s3")

    assert store.get("acct1:s3:buckets") == (None, False)
    assert store.get("acct1:iam:users") == (["alice"], True)


def test_concurrent_set_same_key_leaves_one_written_value():
    store = CacheStore()
    writers = 32
    barrier = threading.Barrier(writers)

    def writer(value):
        barrier.wait()
        store.set("k", value, 3600)

    threads = [threading.Thread(target=writer, args=(i,)) for i in range(writers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    value, found = store.get("k")
    assert found
    assert value in range(writers)
    assert store.size() == 1


def test_concurrent_mixed_operations_do_not_corrupt_store():
    store = CacheStore()
    errors = []

    def worker(n):
        try:
            for i in range(200):
                key = f"p{n % 4}:cat:{i % 10}"
                store.set(key, i, 60)
                store.get(key)
                if i % 25 == 0:
                    store.delete_prefix(f"p{n % 4}:")
                if i % 40 == 0:
                    store.clean_expired()
                store.delete(f"p{n % 4}:cat:{(i + 5) % 10}")
        except Exception as e:  # pragma: no cover - only hit on failure
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    stats = store.stats()
    assert stats["entries"] == stats["live"] == store.size()
