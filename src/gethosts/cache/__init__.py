"""Cache Module - Host list caching for gethosts.

Public API (the "studs"):
    HostListCache: Cache-or-refresh decision for the host list
    CacheEntry: Cached host list file data model
"""

from gethosts.cache.host_cache import CacheEntry, HostListCache

__all__ = [
    "CacheEntry",
    "HostListCache",
]
