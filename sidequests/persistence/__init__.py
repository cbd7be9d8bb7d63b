"""
Persistence - Content pools, results and leaderboards.

Only finished-session results and externally supplied content pools
touch storage. In-progress sessions are never persisted.
"""

from .store import PersistenceService, MemoryStore, JsonFileStore, LeaderboardEntry
from .content import load_pool, validate_units
from .assets import AssetHost

__all__ = [
    "PersistenceService",
    "MemoryStore",
    "JsonFileStore",
    "LeaderboardEntry",
    "load_pool",
    "validate_units",
    "AssetHost",
]
