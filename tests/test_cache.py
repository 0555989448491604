import threading

import pytest

from weather_sdk.cache import CacheManager, ReadWriteLock


def test_get_after_put_returns_value_until_ttl_elapses(clock):
    cache = CacheManager(maxsize=10, ttl_seconds=600, clock=clock)
    cache.put("X", "v")

    assert cache.get_if_valid("X") == "v"

    clock.advance(599)
    assert cache.get_if_valid("X") == "v"

    clock.advance(1)
    assert cache.get_if_valid("X") is None


def test_expired_lookup_drops_the_entry(clock):
    cache = CacheManager(maxsize=10, ttl_seconds=60, clock=clock)
    cache.put("paris", "v")
    clock.advance(60)

    assert cache.get_if_valid("paris") is None
    assert cache.keys() == set()


def test_missing_key_returns_none(clock):
    cache = CacheManager(clock=clock)

    assert cache.get_if_valid("nowhere") is None


def test_keys_are_case_folded(clock):
    cache = CacheManager(clock=clock)
    cache.put("Tokyo", 1)

    assert cache.get_if_valid("TOKYO") == 1
    assert cache.get_if_valid(" tokyo ") == 1
    assert cache.keys() == {"tokyo"}

    cache.remove("ToKyO")
    assert cache.keys() == set()


def test_eleven_inserts_evict_the_first(clock):
    cache = CacheManager(maxsize=10, ttl_seconds=600, clock=clock)
    for index in range(1, 12):
        cache.put(f"k{index}", index)

    keys = cache.keys()
    assert "k1" not in keys
    assert keys == {f"k{index}" for index in range(2, 12)}


def test_valid_hit_protects_entry_from_eviction(clock):
    cache = CacheManager(maxsize=2, ttl_seconds=600, clock=clock)
    cache.put("a", 1)
    cache.put("b", 2)
    cache.get_if_valid("a")
    cache.put("c", 3)

    assert cache.keys() == {"a", "c"}


def test_entry_refreshed_during_upgrade_is_kept(clock, monkeypatch):
    cache = CacheManager(maxsize=10, ttl_seconds=60, clock=clock)
    cache.put("oslo", "stale")
    clock.advance(120)

    original_acquire_write = ReadWriteLock.acquire_write
    sneaked_in = []

    def acquire_write_with_concurrent_refresh(lock):
        # Another writer wins the race between read release and write acquire.
        if not sneaked_in:
            sneaked_in.append(True)
            cache.put("oslo", "fresh")
        original_acquire_write(lock)

    monkeypatch.setattr(ReadWriteLock, "acquire_write", acquire_write_with_concurrent_refresh)

    assert cache.get_if_valid("oslo") == "fresh"
    assert cache.keys() == {"oslo"}


def test_clear_and_len(clock):
    cache = CacheManager(maxsize=5, clock=clock)
    cache.put("a", 1)
    cache.put("b", 2)

    assert len(cache) == 2
    cache.clear()
    assert len(cache) == 0


def test_rejects_non_positive_ttl():
    with pytest.raises(ValueError):
        CacheManager(ttl_seconds=0)


def test_concurrent_access_respects_capacity():
    cache = CacheManager(maxsize=8, ttl_seconds=600)
    barrier = threading.Barrier(8)
    errors = []

    def worker(offset: int) -> None:
        try:
            barrier.wait()
            for index in range(300):
                key = f"city-{(index + offset) % 20}"
                cache.put(key, index)
                cache.get_if_valid(key)
                cache.keys()
                if index % 7 == 0:
                    cache.remove(key)
        except Exception as exc:  # pragma: no cover - surfaced by the assert below
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(offset,)) for offset in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(10)

    assert not errors
    assert len(cache) <= 8


def test_replace_overwrites_only_present_keys(clock):
    cache = CacheManager(maxsize=10, ttl_seconds=600, clock=clock)
    cache.put("Rome", "old")
    clock.advance(30)

    assert cache.replace("rome", "new") is True
    assert cache.get_if_valid("ROME") == "new"
    assert cache.stored_at("rome") == 30

    assert cache.replace("milan", "new") is False
    assert cache.keys() == {"rome"}


def test_stored_at_leaves_recency_alone(clock):
    cache = CacheManager(maxsize=2, ttl_seconds=600, clock=clock)
    cache.put("a", 1)
    cache.put("b", 2)

    assert cache.stored_at("a") == 0
    assert cache.stored_at("missing") is None
    cache.put("c", 3)

    assert cache.keys() == {"b", "c"}
