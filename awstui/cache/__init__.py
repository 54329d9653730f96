"""
Client-side resource cache: keys, TTL store and expiry sweeper.
"""

from .base import CacheBackend
from .keys import KeyBuilder
from .memory import CacheEntry, CacheStore
from .policies import RESOURCE_TTLS_SECONDS, get_ttl, s3_objects_ttl
from .sweeper import ExpirySweeper, SweeperState

__all__ = [
    "CacheBackend",
    "CacheEntry",
    "CacheStore",
    "ExpirySweeper",
    "KeyBuilder",
    "RESOURCE_TTLS_SECONDS",
    "SweeperState",
    "get_ttl",
    "s3_objects_ttl",
]
