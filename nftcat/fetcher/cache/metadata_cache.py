from __future__ import annotations
import json
import logging
from typing import Any, Callable

from nftcat.fetcher.core import Core
from nftcat.fetcher.cache.store import CacheStore, RedisCacheStore, SqliteCacheStore

logger = logging.getLogger(__name__)

ONE_DAY = 24 * 60 * 60


class Bucket:
    """
    Named group of cache entries sharing one expiry.
    """

    #: Bucket name (the key of the hash in the store)
    name: str
    #: Seconds to live after the last write, ``None`` for permanent buckets
    ttl: int | None

    def __init__(self, name: str, ttl: int | None = None):
        self.name = name
        self.ttl = ttl

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __hash__(self):
        return hash((self.name, self.ttl))

    def __repr__(self):
        return f'Bucket({{"name": {self.name}, "ttl": {self.ttl}}})'


#: Resolved token metadata, keyed by ``{contract_address}:{token_id}``
QUERY_TOKEN_BUCKET = Bucket("cache:query_token", ttl=ONE_DAY)
#: Contract name and symbol, keyed by contract address
CONTRACT_INFO_BUCKET = Bucket("cache:contract_info")


class MetadataCache:
    """
    Json cache on top of a :class:`CacheStore`.

    Values are stored as json text. Writing into a bucket with a ttl
    resets the expiry of the whole bucket, since the stores can't
    expire single entries of a hash.

    **Read-through flow**

    ::

                   +---------------+                  +-------+ +------------+
                   | MetadataCache |                  | fetch | | CacheStore |
                   +---------------+                  +-------+ +------------+
        ---------------  |                                |            |
        | Request key  |-|                                |            |
        |--------------| |                                |            |
                         | Find entry                     |            |
                         |-------------------------------------------->|
                         |                                |            |
                         | If not found: fetch            |            |
                         |------------------------------->|            |
                         |                                |            |
                         | If fetched: save entry, expire |            |
                         |-------------------------------------------->|
            -----------  |                                |            |
            | Response |-|                                |            |
            |----------| |                                |            |

    Args:
        store: :class:`CacheStore` instance
    """

    _store: CacheStore

    def __init__(self, store: CacheStore):
        self._store = store

    @staticmethod
    def create(**kwargs) -> MetadataCache:
        """
        Create an instance of :class:`MetadataCache`

        Redis is used when a redis url or client is configured,
        the sqlite3 cache database otherwise.

        Args:
            kwargs: Args for the :class:`nftcat.fetcher.core.Core`

        Returns:
            An instance of :class:`MetadataCache`
        """
        if Core(**kwargs).uses_redis:
            return MetadataCache(RedisCacheStore(**kwargs))
        return MetadataCache(SqliteCacheStore(**kwargs))

    @property
    def store(self) -> CacheStore:
        return self._store

    def get(self, bucket: Bucket, key: str) -> Any | None:
        """
        Read a cached value.

        Args:
            bucket: Cache bucket
            key: Entry key

        Returns:
            Decoded json value or ``None`` if not cached
        """
        raw = self._store.hget(bucket.name, key)
        if raw is None:
            return None
        return json.loads(raw)

    def put(self, bucket: Bucket, key: str, value: Any):
        """
        Write a value and reset the bucket expiry.

        Args:
            bucket: Cache bucket
            key: Entry key
            value: Json serializable value
        """
        self._store.hset(bucket.name, key, json.dumps(value))
        if not bucket.ttl is None:
            self._store.expire(bucket.name, bucket.ttl)

    def get_or_fetch(
        self, bucket: Bucket, key: str, fetch: Callable[[], Any | None]
    ) -> Any | None:
        """
        Read a cached value, fetching and caching it on a miss.

        ``None`` returned by ``fetch`` is not cached.

        Args:
            bucket: Cache bucket
            key: Entry key
            fetch: Called without arguments on a miss

        Returns:
            Cached or fetched value
        """
        cached = self.get(bucket, key)
        if not cached is None:
            logger.debug("Cache hit %s[%s]", bucket.name, key)
            return cached

        logger.debug("Cache miss %s[%s]", bucket.name, key)
        value = fetch()
        if not value is None:
            self.put(bucket, key, value)
        return value

    def clear(self, bucket: Bucket):
        """
        Delete all entries of a bucket
        """
        self._store.delete(bucket.name)
