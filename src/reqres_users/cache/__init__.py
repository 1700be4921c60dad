"""
Cache module for storing API responses and site state.

Provides SQLite-based caching with TTL and tag support, plus a small
key-value state store for values such as the API key.
"""

from reqres_users.cache.sqlite import CacheLayer
from reqres_users.cache.state import StateStore

__all__ = ["CacheLayer", "StateStore"]
