from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from lrucache.cache import DEFAULT_CAPACITY, LRUCache
from lrucache.config import LRUCacheConfig, load_config
from lrucache.errors import (
    CacheConfigError,
    EmptyCacheError,
    InsufficientSpaceError,
    InvalidArgumentError,
    LRUCacheError,
    ReentrantMutationError,
)


def _package_version() -> str:
    try:
        return version("lrucache")
    except PackageNotFoundError:
        # Running from a source checkout, or otherwise not installed.
        return "0.0.0"


__version__ = _package_version()

__all__ = [
    "DEFAULT_CAPACITY",
    "CacheConfigError",
    "EmptyCacheError",
    "InsufficientSpaceError",
    "InvalidArgumentError",
    "LRUCache",
    "LRUCacheConfig",
    "LRUCacheError",
    "ReentrantMutationError",
    "__version__",
    "load_config",
]
