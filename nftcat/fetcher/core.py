"""
Implements :class:`Core` that is used in other modules.
"""

from __future__ import annotations
import os
import threading
from os.path import exists
from sqlite3 import Connection, connect
from functools import cached_property
import requests
from redis import Redis

DEFAULT_HTTP_TIMEOUT = 10.0
session_cache = {}
db_cache = {}
db_lock_cache = {}
redis_cache = {}
_cache_lock = threading.Lock()


class Core:
    """
    A base class for any class that wants to use
    the smart contract REST gateway, an Sqlite3 cache database
    or a Redis cache.

    When deriving this class, you're providing arguments like gateway url,
    OS path to the database or redis url. The resources are instantiated
    on demand though. It means that if you're just querying the gateway
    it's sufficient to supply only the gateway url and skip the cache
    settings in the constructor.

    So this class lightweight and safe to derive from any other
    class.

    **Caching**

    The http session is cached by the gateway url key.
    The sqlite3 connection is cached by the OS path of the database.
    The redis client is cached by the redis url.

    **Environment**

    Every setting falls back to an environment variable when not passed
    explicitly:

    +----------------+-------------------------+
    | Argument       | Environment variable    |
    +================+=========================+
    | ``rest``       | ``CRAFTD_REST``         |
    +----------------+-------------------------+
    | ``cache_path`` | ``NFTCAT_CACHE_PATH``   |
    +----------------+-------------------------+
    | ``redis_url``  | ``NFTCAT_REDIS_URL``    |
    +----------------+-------------------------+
    | ``timeout``    | ``NFTCAT_HTTP_TIMEOUT`` |
    +----------------+-------------------------+

    Args:
        rest: Base url of the smart contract REST gateway
        cache_path: OS path to the cache database
        redis_url: Redis url of the cache (overrides cache_path)
        timeout: Http timeout in seconds
        session: an instance of requests session (overrides rest caching)
        conn: an instance of database connection (overrides cache_path)
        redis: an instance of redis client (overrides redis_url)
    """

    #: Base url of the gateway.
    #: Can be ``None`` until the gateway is actually queried.
    rest: str | None
    #: OS path to the cache database.
    #: Can be ``None`` if :class:`sqlite3.Connection` is injected directly.
    cache_path: str | None
    #: Redis url.
    #: Can be ``None`` if :class:`redis.Redis` is injected directly.
    redis_url: str | None

    def __init__(
        self,
        rest: str | None = None,
        cache_path: str | None = None,
        redis_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
        conn: Connection | None = None,
        redis: Redis | None = None,
    ):
        self.rest = rest
        self.cache_path = cache_path
        self.redis_url = redis_url
        self._timeout = timeout
        self._session = session
        self._conn = conn
        self._redis = redis

    @cached_property
    def gateway_url(self) -> str:
        """
        Base url of the gateway without a trailing slash
        """
        if self.rest is None:
            self.rest = os.environ.get("CRAFTD_REST")

        if not self.rest:
            raise ValueError(
                "Gateway url is not set. \
                Use `CRAFTD_REST` env variable or pass rest explicitly"
            )
        return self.rest.rstrip("/")

    @cached_property
    def timeout(self) -> float:
        """
        Http timeout in seconds
        """
        if not self._timeout is None:
            return self._timeout
        env_value = os.environ.get("NFTCAT_HTTP_TIMEOUT")
        if not env_value is None:
            return float(env_value)
        return DEFAULT_HTTP_TIMEOUT

    @cached_property
    def session(self) -> requests.Session:
        """
        :class:`requests.Session` for querying the gateway
        """
        if not self._session is None:
            return self._session

        with _cache_lock:
            if not self.gateway_url in session_cache:
                session_cache[self.gateway_url] = requests.Session()

        return session_cache[self.gateway_url]

    @cached_property
    def conn(self) -> Connection:
        """
        :class:`sqlite3.Connection` to a database cache
        """
        if not self._conn is None:
            return self._conn

        if self.cache_path is None:
            self.cache_path = os.environ.get("NFTCAT_CACHE_PATH")

        if self.cache_path is None:
            raise ValueError(
                "Cache database path is not set. \
                Use `NFTCAT_CACHE_PATH` env variable or pass cache_path explicitly"
            )

        with _cache_lock:
            if not self.cache_path in db_cache:
                db_cache[self.cache_path] = connection_from_path(self.cache_path)

        return db_cache[self.cache_path]

    @cached_property
    def conn_lock(self) -> threading.Lock:
        """
        Lock serializing access to :attr:`conn`, one per connection
        """
        conn = self.conn
        with _cache_lock:
            if not conn in db_lock_cache:
                db_lock_cache[conn] = threading.Lock()

        return db_lock_cache[conn]

    @cached_property
    def redis(self) -> Redis:
        """
        :class:`redis.Redis` client of the cache
        """
        if not self._redis is None:
            return self._redis

        if not self.uses_redis:
            raise ValueError(
                "Redis url is not set. \
                Use `NFTCAT_REDIS_URL` env variable or pass redis_url explicitly"
            )

        with _cache_lock:
            if not self.redis_url in redis_cache:
                redis_cache[self.redis_url] = Redis.from_url(
                    self.redis_url, decode_responses=True
                )

        return redis_cache[self.redis_url]

    @property
    def uses_redis(self) -> bool:
        """
        ``True`` if the cache lives in redis rather than in sqlite3
        """
        if not self._redis is None:
            return True
        if self.redis_url is None:
            self.redis_url = os.environ.get("NFTCAT_REDIS_URL")
        return bool(self.redis_url)


def connection_from_path(path: str) -> Connection:
    """
    Creates a connection to a database at ``path``.
    If the file at ``path`` doesn't exist, creates a new one and
    initializes a database schema.

    The connection is shared between threads, so every user
    has to serialize access to it.

    Args:
        path: The absolute path to the database

    Returns:
        An instance of sqlite3 Connection

    Note:
        The schema migrations are currently not supported.
    """

    is_fresh = not exists(path)
    conn = connect(path, check_same_thread=False)
    if is_fresh:
        init_db(conn)

    return conn


def init_db(conn: Connection):
    """
    Initialize db schema

    Args:
        conn: Connection to the database
    """
    cursor = conn.cursor()
    # Cache entries table
    cursor.execute(
        """CREATE TABLE IF NOT EXISTS cache_entries
            (bucket text, key text, value text)"""
    )
    cursor.execute(
        """CREATE UNIQUE INDEX IF NOT EXISTS idx_cache_entries_id \
        ON cache_entries(bucket,key)
    """
    )

    # Bucket expiries table
    cursor.execute(
        """CREATE TABLE IF NOT EXISTS cache_buckets
            (bucket text, expires_at real)"""
    )
    cursor.execute(
        """CREATE UNIQUE INDEX IF NOT EXISTS idx_cache_buckets_id
            ON cache_buckets(bucket)"""
    )

    conn.commit()
