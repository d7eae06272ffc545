"""Persistent stores used across pipeline runs."""

from .cache_store import CacheStore, LocalCacheStore
from .fetch_cache import FetchCache

__all__ = ["CacheStore", "FetchCache", "LocalCacheStore"]
