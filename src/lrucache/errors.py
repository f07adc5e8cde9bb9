"""lrucache exception hierarchy.

Keep this module small and dependency-free: it is imported by every other
module in the package and by tests.
"""


class LRUCacheError(Exception):
    """Base exception for all lrucache errors."""


class InvalidArgumentError(LRUCacheError, ValueError):
    """Raised for a non-positive capacity or a negative start index."""


class EmptyCacheError(LRUCacheError, LookupError):
    """Raised when an end of the recency order is requested from an empty cache."""


class InsufficientSpaceError(LRUCacheError, ValueError):
    """Raised when a copy destination cannot hold every cached value."""


class ReentrantMutationError(LRUCacheError, RuntimeError):
    """Raised when an eviction listener tries to mutate the cache that notified it."""


class CacheConfigError(LRUCacheError):
    """Raised for invalid user configuration."""
