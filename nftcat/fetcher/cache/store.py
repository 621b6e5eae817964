from __future__ import annotations
import time
from typing import Callable

from nftcat.fetcher.core import Core


class CacheStore(Core):
    """
    Hash-per-bucket key value store.

    A bucket is a named group of entries. Entries can't expire on
    their own, only the whole bucket can.
    """

    def hget(self, bucket: str, key: str) -> str | None:
        """
        Read an entry.

        Args:
            bucket: Bucket name
            key: Entry key

        Returns:
            Stored text or ``None`` if missing
        """
        raise NotImplementedError

    def hset(self, bucket: str, key: str, value: str):
        """
        Write an entry.

        Args:
            bucket: Bucket name
            key: Entry key
            value: Text to store
        """
        raise NotImplementedError

    def expire(self, bucket: str, seconds: int):
        """
        Expire the whole bucket ``seconds`` from now.
        """
        raise NotImplementedError

    def delete(self, bucket: str):
        """
        Drop the whole bucket.
        """
        raise NotImplementedError


class RedisCacheStore(CacheStore):
    """
    :class:`CacheStore` backed by redis hashes.

    Args:
        kwargs: Args for the :class:`nftcat.fetcher.core.Core`
    """

    def hget(self, bucket: str, key: str) -> str | None:
        value = self.redis.hget(bucket, key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def hset(self, bucket: str, key: str, value: str):
        self.redis.hset(bucket, key, value)

    def expire(self, bucket: str, seconds: int):
        self.redis.expire(bucket, seconds)

    def delete(self, bucket: str):
        self.redis.delete(bucket)


class SqliteCacheStore(CacheStore):
    """
    :class:`CacheStore` backed by the sqlite3 cache database.

    Bucket expiry is stored next to the entries and checked on read.
    An expired bucket is dropped completely.

    Args:
        clock: Returns current unix time, ``time.time`` by default
        kwargs: Args for the :class:`nftcat.fetcher.core.Core`
    """

    _clock: Callable[[], float]

    def __init__(self, clock: Callable[[], float] = time.time, **kwargs):
        super().__init__(**kwargs)
        self._clock = clock

    def hget(self, bucket: str, key: str) -> str | None:
        with self.conn_lock:
            if self._is_expired(bucket):
                self._delete(bucket)
                self.conn.commit()
                return None
            row = self.conn.execute(
                "SELECT value FROM cache_entries WHERE bucket = ? AND key = ?",
                (bucket, key),
            ).fetchone()
        if not row:
            return None
        return row[0]

    def hset(self, bucket: str, key: str, value: str):
        with self.conn_lock:
            if self._is_expired(bucket):
                self._delete(bucket)
            self.conn.execute(
                "INSERT INTO cache_entries VALUES(?,?,?) "
                "ON CONFLICT(bucket,key) DO UPDATE SET value = excluded.value",
                (bucket, key, value),
            )
            self.conn.commit()

    def expire(self, bucket: str, seconds: int):
        with self.conn_lock:
            self.conn.execute(
                "INSERT INTO cache_buckets VALUES(?,?) "
                "ON CONFLICT(bucket) DO UPDATE SET expires_at = excluded.expires_at",
                (bucket, self._clock() + seconds),
            )
            self.conn.commit()

    def delete(self, bucket: str):
        with self.conn_lock:
            self._delete(bucket)
            self.conn.commit()

    def _is_expired(self, bucket: str) -> bool:
        row = self.conn.execute(
            "SELECT expires_at FROM cache_buckets WHERE bucket = ?", (bucket,)
        ).fetchone()
        return bool(row) and row[0] <= self._clock()

    def _delete(self, bucket: str):
        self.conn.execute("DELETE FROM cache_entries WHERE bucket = ?", (bucket,))
        self.conn.execute("DELETE FROM cache_buckets WHERE bucket = ?", (bucket,))
