"""Configuration loading for lrucache.

This module only reads `lrucache.toml` and performs light validation; it never
constructs caches itself (see ``LRUCache.from_config``).
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lrucache.cache import DEFAULT_CAPACITY
from lrucache.errors import CacheConfigError

CONFIG_FILENAME = "lrucache.toml"


@dataclass(frozen=True)
class CacheSettings:
    capacity: int
    name: str


@dataclass(frozen=True)
class LRUCacheConfig:
    version: int
    cache: CacheSettings


def find_project_root(start: Path) -> Path:
    """Walk upward from `start` (file or directory) looking for `lrucache.toml`."""

    cur = start
    try:
        if cur.is_file():
            cur = cur.parent
    except OSError:
        cur = cur.parent

    cur = cur.resolve()
    while True:
        if (cur / CONFIG_FILENAME).is_file():
            return cur
        if cur.parent == cur:
            break
        cur = cur.parent

    raise CacheConfigError(f"Could not find {CONFIG_FILENAME} by walking upward from start path.")


def _as_table(value: Any, *, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise CacheConfigError(f"Expected [{name}] to be a table.")
    return value


def _as_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise CacheConfigError(f"Expected {name} to be an integer.")
    return value


def _as_str(value: Any, *, name: str) -> str:
    if not isinstance(value, str):
        raise CacheConfigError(f"Expected {name} to be a string.")
    return value


def load_config(*, root: Path | None = None, config_path: Path | None = None) -> LRUCacheConfig:
    """Load and validate `lrucache.toml`.

    If neither `root` nor `config_path` are provided, the project root is
    discovered by walking upward from the current working directory.
    """

    if config_path is None:
        if root is None:
            root = find_project_root(Path.cwd())
        config_path = root / CONFIG_FILENAME

    try:
        raw = config_path.read_bytes()
    except FileNotFoundError as e:
        raise CacheConfigError(f"Missing {CONFIG_FILENAME} at: {config_path}") from e
    except OSError as e:
        raise CacheConfigError(f"Failed reading config file: {config_path}") from e

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise CacheConfigError(f"Config is not valid UTF-8: {config_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise CacheConfigError(f"Invalid TOML in {config_path}: {e}") from e

    version = data.get("version", None)
    if version is None:
        raise CacheConfigError(f"Missing required `version = 1` in {CONFIG_FILENAME}.")
    version_i = _as_int(version, name="version")
    if version_i != 1:
        raise CacheConfigError(f"Unsupported config version: {version_i} (expected 1).")

    cache_tbl = _as_table(data.get("cache"), name="cache")

    if "capacity" in cache_tbl:
        capacity = _as_int(cache_tbl["capacity"], name="cache.capacity")
    else:
        capacity = DEFAULT_CAPACITY

    if "name" in cache_tbl:
        name = _as_str(cache_tbl["name"], name="cache.name")
    else:
        name = "lrucache"

    if capacity < 1:
        raise CacheConfigError("Invalid config: cache.capacity must be >= 1.")

    return LRUCacheConfig(version=version_i, cache=CacheSettings(capacity=capacity, name=name))
