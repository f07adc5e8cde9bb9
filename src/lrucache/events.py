from __future__ import annotations

from collections.abc import Callable
from typing import Any

from lrucache.errors import InvalidArgumentError

EvictionListener = Callable[[Any], None]


class EvictionListeners:
    """Ordered eviction subscribers.

    Registering the same callable twice registers it twice.  ``notify`` calls
    every listener in registration order and lets exceptions propagate.
    """

    def __init__(self) -> None:
        self._listeners: list[EvictionListener] = []

    def __len__(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: EvictionListener) -> None:
        if not callable(listener):
            raise InvalidArgumentError(f"eviction listener must be callable, got {listener!r}")
        self._listeners.append(listener)

    def unsubscribe(self, listener: EvictionListener) -> bool:
        """Drop the earliest registration of *listener*; return whether one was found."""

        try:
            self._listeners.remove(listener)
        except ValueError:
            return False
        return True

    def notify(self, source: Any) -> None:
        # Iterate a copy: a listener may (un)subscribe while being notified.
        for listener in tuple(self._listeners):
            listener(source)
