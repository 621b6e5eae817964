"""
Module for caching gateway responses.

The main class of this module is :class:`MetadataCache`.
It keeps json values in named buckets of a :class:`CacheStore`
(redis or the sqlite3 cache database).

Example:
    ::

        from nftcat.fetcher.cache import MetadataCache, QUERY_TOKEN_BUCKET

        cache = MetadataCache.create(cache_path="cache.sqlite3")
        cache.get_or_fetch(QUERY_TOKEN_BUCKET, "craft1...:1", lambda: {"a": 1})
        # => calling fetch
        cache.get_or_fetch(QUERY_TOKEN_BUCKET, "craft1...:1", lambda: {"a": 1})
        # => serving from cache
"""

from nftcat.fetcher.cache.store import CacheStore, RedisCacheStore, SqliteCacheStore
from nftcat.fetcher.cache.metadata_cache import (
    Bucket,
    MetadataCache,
    QUERY_TOKEN_BUCKET,
    CONTRACT_INFO_BUCKET,
)
