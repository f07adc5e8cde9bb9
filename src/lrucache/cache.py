"""Thread-safe fixed-capacity LRU container.

Only ``add`` affects recency: re-adding a present value moves it to the
most-recently-touched position, while lookups (``contains``, ``oldest``,
iteration) leave the order alone.

Every public method runs under one re-entrant lock guarding the chain, the
index and the count together.  Eviction listeners are called while that lock
is held, so they see the cache exactly as it was when the victim was chosen
(``cache.oldest`` is the value about to be evicted).  Listeners may read the
cache; mutating it from inside a listener raises ``ReentrantMutationError``.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Hashable, Iterator, MutableSequence
from typing import TYPE_CHECKING, Generic, TypeVar

from lrucache.chain import RecencyChain
from lrucache.errors import (
    EmptyCacheError,
    InsufficientSpaceError,
    InvalidArgumentError,
    ReentrantMutationError,
)
from lrucache.events import EvictionListener, EvictionListeners

if TYPE_CHECKING:
    from lrucache.config import LRUCacheConfig

logger = logging.getLogger("lrucache.cache")

T = TypeVar("T")

# Large enough that a few thousand entries never evict silently.
DEFAULT_CAPACITY = 10_000


class LRUCache(Generic[T]):
    """A bounded collection that evicts its least recently added value when full.

    ``key`` maps a value to the hashable key used for duplicate detection and
    lookups; by default the value itself is the key, so values must be
    hashable and compare with their own ``__eq__``.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        *,
        key: Callable[[T], Hashable] | None = None,
        name: str = "lrucache",
    ) -> None:
        if not isinstance(capacity, int) or isinstance(capacity, bool):
            raise InvalidArgumentError(f"capacity must be an integer, got {capacity!r}")
        if capacity <= 0:
            raise InvalidArgumentError(f"capacity must be positive, got {capacity}")

        self._capacity = capacity
        self._name = name
        self._lock = threading.RLock()
        self._chain: RecencyChain[T] = RecencyChain(key=key)
        self._listeners = EvictionListeners()
        # Set only while the lock is held, so only the notifying thread sees it.
        self._notifying = False

    @classmethod
    def from_config(
        cls, config: LRUCacheConfig, *, key: Callable[[T], Hashable] | None = None
    ) -> LRUCache[T]:
        return cls(config.cache.capacity, key=key, name=config.cache.name)

    def __repr__(self) -> str:
        with self._lock:
            count = len(self._chain)
        return f"<LRUCache {self._name!r} count={count} capacity={self._capacity}>"

    # -- read accessors ------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._chain)

    def __len__(self) -> int:
        return self.count

    def __bool__(self) -> bool:
        return self.count > 0

    @property
    def is_read_only(self) -> bool:
        return False

    def contains(self, value: T) -> bool:
        with self._lock:
            return self._chain.find(value) is not None

    def __contains__(self, value: object) -> bool:
        return self.contains(value)  # type: ignore[arg-type]

    @property
    def oldest(self) -> T:
        """The least recently added value."""

        with self._lock:
            slot = self._chain.tail()
            if slot is None:
                raise EmptyCacheError("cache is empty")
            return self._chain.value_at(slot)

    @property
    def newest(self) -> T:
        """The most recently added (or re-added) value."""

        with self._lock:
            slot = self._chain.head()
            if slot is None:
                raise EmptyCacheError("cache is empty")
            return self._chain.value_at(slot)

    def snapshot(self) -> list[T]:
        """Return the current values, oldest first."""

        with self._lock:
            return list(self._chain.values_oldest_first())

    def __iter__(self) -> Iterator[T]:
        return iter(self.snapshot())

    def copy_to(self, destination: MutableSequence[T], start_index: int = 0) -> None:
        """Write the current values, oldest first, into *destination* from *start_index*."""

        if start_index < 0:
            raise InvalidArgumentError(f"start_index must be >= 0, got {start_index}")
        with self._lock:
            needed = len(self._chain)
            available = len(destination) - start_index
            if available < needed:
                raise InsufficientSpaceError(
                    f"destination has {max(available, 0)} slots from index {start_index}, "
                    f"{needed} needed"
                )
            for offset, value in enumerate(self._chain.values_oldest_first()):
                destination[start_index + offset] = value

    # -- mutation ------------------------------------------------------------

    def _check_not_notifying(self, op: str) -> None:
        if self._notifying:
            raise ReentrantMutationError(
                f"{op}() called on {self._name!r} from inside an eviction listener"
            )

    def add(self, value: T) -> None:
        """Insert *value* as the newest entry, or move an equal entry to newest.

        When the cache is full and *value* is new, eviction listeners are
        notified first and the oldest entry is then discarded.
        """

        with self._lock:
            self._check_not_notifying("add")
            slot = self._chain.find(value)
            if slot is not None:
                self._chain.touch(slot)
                return
            if len(self._chain) >= self._capacity:
                self._evict_oldest()
            self._chain.insert_new(value)

    def _evict_oldest(self) -> None:
        victim = self._chain.tail()
        assert victim is not None

        self._notifying = True
        try:
            self._listeners.notify(self)
        finally:
            self._notifying = False

        evicted = self._chain.unlink(victim)
        logger.debug("Evicted %r from %s (capacity %d)", evicted, self._name, self._capacity)

    def remove(self, value: T) -> bool:
        """Remove the entry equal to *value*; return False if there was none."""

        with self._lock:
            self._check_not_notifying("remove")
            slot = self._chain.find(value)
            if slot is None:
                return False
            self._chain.unlink(slot)
            return True

    def clear(self) -> None:
        with self._lock:
            self._check_not_notifying("clear")
            dropped = len(self._chain)
            self._chain.clear()
        logger.debug("Cleared %d entries from %s", dropped, self._name)

    # -- eviction listeners --------------------------------------------------

    def subscribe(self, listener: EvictionListener) -> EvictionListener:
        """Register *listener* to be called as ``listener(cache)`` before each eviction.

        Returns *listener* so this can be used as a decorator.
        """

        with self._lock:
            self._listeners.subscribe(listener)
        return listener

    def unsubscribe(self, listener: EvictionListener) -> bool:
        with self._lock:
            return self._listeners.unsubscribe(listener)
