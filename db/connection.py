"""
db/connection.py
----------------
Opens the connection pool for the configured backend.

PostgreSQL uses psycopg2's ThreadedConnectionPool. PyMySQL ships no pool,
so MySQL connections are pooled by SQLAlchemy's QueuePool behind
`MySQLConnectionPool`, which offers psycopg2's getconn/putconn/closeall
methods. Repositories borrow connections the same way from either backend,
and both pools are safe to share between threads.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum

import psycopg2
import pymysql
from psycopg2 import pool
from sqlalchemy import exc as sa_exc
from sqlalchemy.pool import QueuePool

import config
from utils.errors import ConfigurationError, StorageError
from utils.logger import get_logger

logger = get_logger(__name__)

# sslmode values (libpq names) that encrypt without checking the certificate.
_TLS_UNVERIFIED = {"allow", "prefer", "require"}
_TLS_VERIFIED = {"verify-ca", "verify-full"}


class BackendKind(str, Enum):
    """Storage backends a repository can be built for."""
    POSTGRES = "postgres"
    MYSQL = "mysql"

    @classmethod
    def parse(cls, value: str) -> "BackendKind":
        """
        Resolve a backend name from configuration.

        Raises:
            ConfigurationError: If the name is not a known backend.
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            known = ", ".join(k.value for k in cls)
            raise ConfigurationError(
                f"unknown database backend {value!r} (expected one of: {known})"
            ) from None


@dataclass
class DatabaseConfig:
    """Connection parameters shared by both backends."""
    host: str
    port: int
    user: str
    password: str
    dbname: str
    sslmode: str = "disable"
    sslrootcert: str = ""

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        return cls(
            host=config.DB_HOST,
            port=config.DB_PORT,
            user=config.DB_USER,
            password=config.DB_PASS,
            dbname=config.DB_NAME,
            sslmode=config.DB_SSLMODE,
            sslrootcert=config.DB_SSLROOTCERT,
        )


def open_postgres_pool(
    cfg: DatabaseConfig, min_conn: int = 1, max_conn: int = 5
) -> pool.ThreadedConnectionPool:
    """
    Create a psycopg2 connection pool.

    Raises:
        StorageError: If the database is unreachable.
    """
    params = dict(
        host=cfg.host,
        port=cfg.port,
        user=cfg.user,
        password=cfg.password,
        dbname=cfg.dbname,
        sslmode=cfg.sslmode,
    )
    if cfg.sslrootcert:
        params["sslrootcert"] = cfg.sslrootcert
    try:
        pg_pool = pool.ThreadedConnectionPool(min_conn, max_conn, **params)
    except psycopg2.Error as e:
        logger.error(f"Failed to initialize PostgreSQL pool: {e}")
        raise StorageError(f"failed to open database: {e}") from e
    logger.info(f"PostgreSQL pool ready ({cfg.host}:{cfg.port}/{cfg.dbname}).")
    return pg_pool


def mysql_connect_args(cfg: DatabaseConfig) -> dict:
    """
    Build the `pymysql.connect()` keyword arguments for `cfg`.

    sslmode follows libpq's names: `require` encrypts without checking the
    server, `verify-ca` checks the certificate against DB_SSLROOTCERT and
    `verify-full` also checks the host name.

    Raises:
        ConfigurationError: If sslmode is unknown, or a verifying mode has
            no CA file configured.
    """
    args = dict(
        host=cfg.host,
        port=cfg.port,
        user=cfg.user,
        password=cfg.password,
        database=cfg.dbname,
        autocommit=False,
    )
    mode = cfg.sslmode
    if mode == "disable":
        args["ssl_disabled"] = True
    elif mode in _TLS_UNVERIFIED:
        args["ssl"] = {"check_hostname": False}
    elif mode in _TLS_VERIFIED:
        if not cfg.sslrootcert:
            raise ConfigurationError(f"sslmode {mode!r} requires DB_SSLROOTCERT")
        args["ssl_ca"] = cfg.sslrootcert
        args["ssl_verify_cert"] = True
        args["ssl_verify_identity"] = mode == "verify-full"
    else:
        raise ConfigurationError(f"unknown sslmode {mode!r}")
    return args


class MySQLConnectionPool:
    """
    PyMySQL connections held in a SQLAlchemy QueuePool.

    At most `max_conn` connections exist at once; a borrower waits up to
    `timeout` seconds for one to come back. Returned connections are rolled
    back by the pool, so no transaction outlives a borrow.
    """

    def __init__(
        self,
        cfg: DatabaseConfig,
        min_conn: int = 1,
        max_conn: int = 5,
        timeout: float = 30,
    ):
        self.cfg = cfg
        self.closed = False
        self._connect_args = mysql_connect_args(cfg)
        self._pool = QueuePool(
            self._connect,
            pool_size=max_conn,
            max_overflow=0,
            timeout=timeout,
            reset_on_return="rollback",
        )
        # Open min_conn connections now so a bad server fails at startup.
        warm = [self._pool.connect() for _ in range(min_conn)]
        for conn in warm:
            conn.close()

    def _connect(self):
        try:
            return pymysql.connect(**self._connect_args)
        except pymysql.MySQLError as e:
            logger.error(f"Failed to connect to MySQL: {e}")
            raise StorageError(f"failed to open database: {e}") from e

    def getconn(self):
        """
        Borrow a connection.

        Raises:
            StorageError: If the pool is closed, or no connection became
                free within the timeout.
        """
        if self.closed:
            raise StorageError("connection pool is closed")
        try:
            return self._pool.connect()
        except sa_exc.TimeoutError as e:
            raise StorageError(f"connection pool exhausted: {e}") from e

    def putconn(self, conn) -> None:
        """
        Give a borrowed connection back; the pool rolls it back.
        After `closeall()` the connection is closed instead.
        """
        if self.closed:
            conn.invalidate()
        else:
            conn.close()

    def closeall(self) -> None:
        """Close idle connections and refuse further borrows."""
        self.closed = True
        self._pool.dispose()


def open_mysql_pool(
    cfg: DatabaseConfig, min_conn: int = 1, max_conn: int = 5
) -> MySQLConnectionPool:
    """Create a pooled set of PyMySQL connections."""
    mysql_pool = MySQLConnectionPool(cfg, min_conn, max_conn, config.DB_POOL_TIMEOUT)
    logger.info(f"MySQL pool ready ({cfg.host}:{cfg.port}/{cfg.dbname}).")
    return mysql_pool


def open_pool(kind: BackendKind, cfg: DatabaseConfig):
    """Open the pool for the selected backend, sized from configuration."""
    if kind is BackendKind.POSTGRES:
        return open_postgres_pool(cfg, config.DB_POOL_MIN, config.DB_POOL_MAX)
    return open_mysql_pool(cfg, config.DB_POOL_MIN, config.DB_POOL_MAX)


@contextmanager
def pooled_connection(db_pool):
    """
    Borrow a connection for the duration of a `with` block.

    The connection goes back to the pool whatever happens inside the block;
    commit and rollback stay with the caller.
    """
    try:
        conn = db_pool.getconn()
    except StorageError:
        raise
    except Exception as e:
        raise StorageError(f"failed to get a connection: {e}") from e
    try:
        yield conn
    finally:
        db_pool.putconn(conn)
