"""
Two-tier time-bounded cache for AI ignore results

File-level entries hold per-file statuses, workspace-level entries hold the
aggregated configuration they were computed from. Invalidating the workspace
level cascades to file-level keys sharing the same prefix.
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..constants import DEFAULT_FILE_TTL, DEFAULT_WORKSPACE_TTL
from ..utils import get_logger

logger = get_logger(__name__)

FILE_LEVEL = 'file'
WORKSPACE_LEVEL = 'workspace'

# Terminates the workspace part of every key so one workspace URI is never
# a prefix of a sibling's keys (file:///a/b vs file:///a/bc)
KEY_SEPARATOR = ':'


def workspace_cache_key(workspace_uri: str) -> str:
    return workspace_uri + KEY_SEPARATOR


def file_cache_key(workspace_uri: str, relative_path: str) -> str:
    return workspace_cache_key(workspace_uri) + relative_path


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    expires_at: float


class TTLCache:
    """Thread-safe map whose entries expire lazily on read"""

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._cache: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache, dropping it if expired"""
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                self._misses += 1
                return None
            if self._clock() > entry.expires_at:
                del self._cache[key]
                self._misses += 1
                return None
            self._hits += 1
            return entry.value

    def put(self, key: str, value: Any, ttl: Optional[float] = None):
        with self._lock:
            lifetime = self.ttl if ttl is None else ttl
            self._cache[key] = CacheEntry(value=value, expires_at=self._clock() + lifetime)

    def invalidate_prefix(self, prefix: Optional[str] = None):
        """Remove all keys starting with prefix, or everything when no prefix"""
        with self._lock:
            if not prefix:
                self._cache.clear()
                return
            for key in [k for k in self._cache if k.startswith(prefix)]:
                del self._cache[key]

    def clear(self):
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    def keys(self):
        with self._lock:
            return list(self._cache)

    def get_stats(self) -> Dict[str, float]:
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0
            return {
                'size': len(self._cache),
                'hits': self._hits,
                'misses': self._misses,
                'hit_rate': hit_rate,
            }


class AiIgnoreCache:
    """
    File-level and workspace-level caches with cascading invalidation
    """

    def __init__(self,
                 file_ttl: float = DEFAULT_FILE_TTL,
                 workspace_ttl: float = DEFAULT_WORKSPACE_TTL,
                 clock: Callable[[], float] = time.monotonic):
        """
        Initialize cache

        Args:
            file_ttl: Default lifetime of file-level entries in seconds
            workspace_ttl: Default lifetime of workspace-level entries in seconds
            clock: Monotonic time source
        """
        self._file_cache = TTLCache(file_ttl, clock)
        self._workspace_cache = TTLCache(workspace_ttl, clock)
        # Bumped on every invalidation; writers computed before a bump are dropped
        self._generation = 0
        self._invalidate_lock = threading.Lock()

    @classmethod
    def from_config(cls, config) -> "AiIgnoreCache":
        return cls(file_ttl=config.file_ttl, workspace_ttl=config.workspace_ttl)

    @property
    def file_ttl(self) -> float:
        return self._file_cache.ttl

    @property
    def workspace_ttl(self) -> float:
        return self._workspace_cache.ttl

    @property
    def generation(self) -> int:
        """Invalidation counter, captured before computing a value to cache"""
        with self._invalidate_lock:
            return self._generation

    def get_file(self, key: str) -> Optional[Any]:
        return self._file_cache.get(key)

    def set_file(self, key: str, value: Any, ttl: Optional[float] = None,
                 generation: Optional[int] = None) -> bool:
        return self._put(self._file_cache, key, value, ttl, generation)

    def get_workspace(self, key: str) -> Optional[Any]:
        return self._workspace_cache.get(key)

    def set_workspace(self, key: str, value: Any, ttl: Optional[float] = None,
                      generation: Optional[int] = None) -> bool:
        return self._put(self._workspace_cache, key, value, ttl, generation)

    def _put(self, cache: TTLCache, key: str, value: Any,
             ttl: Optional[float], generation: Optional[int]) -> bool:
        with self._invalidate_lock:
            if generation is not None and generation != self._generation:
                logger.debug(f"Dropping stale cache write for {key}")
                return False
            cache.put(key, value, ttl)
            return True

    def invalidate(self, level: str, key_prefix: Optional[str] = None):
        """
        Invalidate one level, optionally limited to keys with a prefix

        Args:
            level: 'file' or 'workspace'
            key_prefix: Only drop keys starting with this prefix
        """
        if level not in (FILE_LEVEL, WORKSPACE_LEVEL):
            raise ValueError(f"Unknown cache level: {level!r}")

        with self._invalidate_lock:
            self._generation += 1
            if level == WORKSPACE_LEVEL:
                self._workspace_cache.invalidate_prefix(key_prefix)
            # File statuses are derived from the workspace config
            self._file_cache.invalidate_prefix(key_prefix)
        logger.debug(f"Invalidated {level} cache (prefix={key_prefix!r})")

    def clear(self):
        """Clear all caches"""
        with self._invalidate_lock:
            self._generation += 1
            self._file_cache.clear()
            self._workspace_cache.clear()

    def get_stats(self) -> Dict[str, Dict[str, float]]:
        return {
            'file_cache': self._file_cache.get_stats(),
            'workspace_cache': self._workspace_cache.get_stats(),
        }
