#!/usr/bin/env python3
"""
Runtime configuration for the resolvers, cache and config watcher.

Values come from constructor arguments first, then environment variables,
then the defaults in constants.py.
"""

import os
from dataclasses import dataclass
from typing import Dict, Optional

from .constants import DEFAULT_FILE_TTL, DEFAULT_WORKSPACE_TTL, DEFAULT_DEBOUNCE_SECONDS
from .utils import get_logger

logger = get_logger(__name__)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={raw!r}, using {default}")
        return default


@dataclass(frozen=True)
class ResolverConfig:
    """Cache lifetimes and watcher timing

    Attributes:
        file_ttl: Seconds a per-file AI ignore status stays cached
        workspace_ttl: Seconds an aggregated workspace config stays cached
        debounce_seconds: Minimum time between watcher notifications for one path
    """
    file_ttl: float = DEFAULT_FILE_TTL
    workspace_ttl: float = DEFAULT_WORKSPACE_TTL
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS

    def __post_init__(self):
        """Validate configuration"""
        if self.file_ttl <= 0:
            raise ValueError(f"file_ttl must be positive, got {self.file_ttl}")
        if self.workspace_ttl <= 0:
            raise ValueError(f"workspace_ttl must be positive, got {self.workspace_ttl}")
        if self.debounce_seconds < 0:
            raise ValueError(f"debounce_seconds must not be negative, got {self.debounce_seconds}")

    @classmethod
    def from_env(cls,
                 file_ttl: Optional[float] = None,
                 workspace_ttl: Optional[float] = None,
                 debounce_seconds: Optional[float] = None) -> "ResolverConfig":
        """Build a config, filling unset values from CONFIGNORE_* environment variables"""
        return cls(
            file_ttl=file_ttl if file_ttl is not None else _env_float(
                "CONFIGNORE_FILE_CACHE_TTL", DEFAULT_FILE_TTL),
            workspace_ttl=workspace_ttl if workspace_ttl is not None else _env_float(
                "CONFIGNORE_WORKSPACE_CACHE_TTL", DEFAULT_WORKSPACE_TTL),
            debounce_seconds=debounce_seconds if debounce_seconds is not None else _env_float(
                "CONFIGNORE_WATCH_DEBOUNCE", DEFAULT_DEBOUNCE_SECONDS),
        )

    def get_config_summary(self) -> Dict[str, float]:
        return {
            'file_ttl': self.file_ttl,
            'workspace_ttl': self.workspace_ttl,
            'debounce_seconds': self.debounce_seconds,
        }
