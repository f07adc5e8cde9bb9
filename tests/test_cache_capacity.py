"""Eviction when the cache is at capacity."""

from __future__ import annotations

import logging

import pytest

from lrucache import LRUCache
from lrucache.errors import ReentrantMutationError

CAPACITY = 100


def _full_cache() -> LRUCache[object]:
    cache: LRUCache[object] = LRUCache(CAPACITY)
    for _ in range(CAPACITY):
        cache.add(object())
    return cache


def test_oldest_object_is_removed_when_cache_is_at_capacity() -> None:
    cache = _full_cache()
    discarded: list[object] = []
    still_present: list[bool] = []

    def on_evict(source: LRUCache[object]) -> None:
        discarded.append(source.oldest)
        still_present.append(source.contains(source.oldest))
        assert source.count == CAPACITY

    cache.subscribe(on_evict)

    for i in range(100):
        o = cache.oldest
        assert cache.contains(o)
        cache.add(object())
        assert discarded[i] is o
        assert not cache.contains(o)
        assert cache.count == CAPACITY

    assert all(still_present)
    cache._chain.validate()


def test_listener_receives_cache_as_source() -> None:
    cache: LRUCache[int] = LRUCache(1)
    sources: list[object] = []
    cache.subscribe(sources.append)
    cache.add(1)
    cache.add(2)

    assert sources == [cache]
    assert list(cache) == [2]


def test_touching_existing_value_does_not_evict() -> None:
    cache: LRUCache[int] = LRUCache(3)
    notified: list[object] = []
    cache.subscribe(notified.append)
    for i in range(3):
        cache.add(i)

    cache.add(0)
    assert notified == []
    assert list(cache) == [1, 2, 0]

    cache.add(3)
    assert len(notified) == 1
    assert list(cache) == [2, 0, 3]


def test_remove_does_not_notify() -> None:
    cache: LRUCache[int] = LRUCache(2)
    notified: list[object] = []
    cache.subscribe(notified.append)
    cache.add(1)
    cache.add(2)
    cache.remove(1)
    cache.add(3)

    assert notified == []
    assert list(cache) == [2, 3]


def test_listeners_run_in_registration_order() -> None:
    cache: LRUCache[int] = LRUCache(1)
    order: list[str] = []
    cache.subscribe(lambda c: order.append("a"))
    cache.subscribe(lambda c: order.append("b"))
    cache.add(1)
    cache.add(2)

    assert order == ["a", "b"]


def test_unsubscribed_listener_is_not_called() -> None:
    cache: LRUCache[int] = LRUCache(1)
    notified: list[object] = []

    @cache.subscribe
    def on_evict(source: object) -> None:
        notified.append(source)

    assert cache.unsubscribe(on_evict) is True
    assert cache.unsubscribe(on_evict) is False
    cache.add(1)
    cache.add(2)

    assert notified == []


def test_listener_failure_leaves_cache_unchanged() -> None:
    cache: LRUCache[int] = LRUCache(2)
    cache.add(1)
    cache.add(2)

    def boom(source: object) -> None:
        raise RuntimeError("listener failed")

    cache.subscribe(boom)
    with pytest.raises(RuntimeError, match="listener failed"):
        cache.add(3)

    assert list(cache) == [1, 2]
    cache._chain.validate()

    cache.unsubscribe(boom)
    cache.add(3)
    assert list(cache) == [2, 3]


@pytest.mark.parametrize("op", ["add", "remove", "clear"])
def test_mutation_from_listener_is_rejected(op: str) -> None:
    cache: LRUCache[int] = LRUCache(1)
    cache.add(1)

    def mutate(source: LRUCache[int]) -> None:
        if op == "add":
            source.add(99)
        elif op == "remove":
            source.remove(1)
        else:
            source.clear()

    cache.subscribe(mutate)
    with pytest.raises(ReentrantMutationError):
        cache.add(2)

    assert list(cache) == [1]

    cache.unsubscribe(mutate)
    cache.add(2)
    assert list(cache) == [2]


def test_eviction_is_logged_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    cache: LRUCache[str] = LRUCache(1, name="sessions")
    cache.add("a")
    with caplog.at_level(logging.DEBUG, logger="lrucache.cache"):
        cache.add("b")

    assert any("Evicted 'a' from sessions" in r.getMessage() for r in caplog.records)


def test_capacity_one_keeps_only_latest() -> None:
    cache: LRUCache[int] = LRUCache(1)
    for i in range(10):
        cache.add(i)
        assert cache.count == 1
        assert cache.oldest == i
