"""
Name: SQL Server Connection Pool

Responsibilities:
  - Lazily open one connection pool on first demand and reuse it afterwards
  - Replace pooled connections that sat idle longer than the idle timeout
  - Dispose the pool on shutdown/unregister

Collaborators:
  - sqlalchemy: Engine + QueuePool over pymssql connections
  - pymssql: DB-API driver (connections built by _connect)
  - infrastructure.db.errors: translate connect failures
  - infrastructure.db.classifier: log classified connect failures

Constraints:
  - One pool per PoolManager; the composition root owns one PoolManager
  - First-time open is guarded by a lock (double-checked)
  - No liveness check on reuse; a stale pool stays in place after failures

Notes:
  - acquire() returns the Engine; executors check out raw DB-API connections
  - A failed open disposes the half-built engine and retains nothing
"""

import threading
import time
from typing import Optional

import pymssql
from sqlalchemy import create_engine, event, exc as sa_exc
from sqlalchemy.engine import Engine

from ...domain.entities import ConnectionConfig
from ...exceptions import ConnectionFailure
from ...logger import logger
from .classifier import report_error
from .errors import DriverPhase, translate_driver_error

# R: Key under which a pooled connection records when it was checked in
_IDLE_SINCE_KEY = "idle_since"

# R: Monotonic clock used for idle bookkeeping
_clock = time.monotonic


def _connect(config: ConnectionConfig):
    """R: Build one pymssql connection for the pool."""
    kwargs = {
        "server": config.server,
        "user": config.user,
        "password": config.password,
        "database": config.database,
        "login_timeout": config.login_timeout_seconds,
        "timeout": config.query_timeout_seconds,
        "appname": "mssql-integration",
    }
    # R: A named instance is resolved by the SQL Browser; the port is not used
    if not config.instance_name:
        kwargs["port"] = str(config.port)
    return pymssql.connect(**kwargs)


def _install_idle_timeout(engine: Engine, idle_timeout_seconds: float) -> None:
    """
    R: Discard connections that were idle in the pool for too long.

    A connection is stamped on checkin; on checkout, one idle longer than the
    timeout raises DisconnectionError, which makes the pool drop it and
    connect again.
    """

    @event.listens_for(engine, "checkin")
    def _stamp_idle(dbapi_connection, connection_record):
        connection_record.info[_IDLE_SINCE_KEY] = _clock()

    @event.listens_for(engine, "checkout")
    def _expire_idle(dbapi_connection, connection_record, connection_proxy):
        idle_since = connection_record.info.pop(_IDLE_SINCE_KEY, None)
        if idle_since is None:
            return
        if _clock() - idle_since > idle_timeout_seconds:
            raise sa_exc.DisconnectionError("Idle connection expired")


def build_engine(config: ConnectionConfig) -> Engine:
    """R: Create (but do not open) the pooled engine for config."""
    engine = create_engine(
        "mssql+pymssql://",
        creator=lambda: _connect(config),
        pool_size=config.pool_size,
        max_overflow=0,
    )
    _install_idle_timeout(engine, config.idle_timeout_seconds)
    return engine


class PoolManager:
    """
    R: Owns the single connection pool of the process.

    Built once by the composition root (container.get_pool_manager) and
    injected into every action use case.
    """

    def __init__(self, config: ConnectionConfig):
        self.config = config
        self._pool: Optional[Engine] = None
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    def acquire(self) -> Engine:
        """
        R: Return the shared pool, opening it on first use.

        Returns:
            The pooled Engine (same instance on every call once opened)

        Raises:
            ConnectionFailure: If the pool could not be opened
        """
        pool = self._pool
        if pool is not None:
            return pool

        with self._lock:
            if self._pool is None:
                self._pool = self._open()
            return self._pool

    def _open(self) -> Engine:
        engine = build_engine(self.config)
        try:
            # R: Check out one connection so a bad configuration fails here
            with engine.connect():
                pass
        except Exception as exc:
            engine.dispose()
            driver_error = translate_driver_error(exc, DriverPhase.CONNECT)
            classified = report_error(driver_error, logger)
            logger.error(
                f"Failed to connect to Microsoft SQL Server: {driver_error.message}",
                extra={"server": self.config.server, "database": self.config.database},
            )
            raise ConnectionFailure(
                f"Failed to connect to Microsoft SQL Server, {driver_error.message}",
                original_error=driver_error,
                classified=classified,
            ) from exc

        logger.info(
            "Successfully connected to Microsoft SQL Server",
            extra={
                "server": self.config.server,
                "database": self.config.database,
                "pool_size": self.config.pool_size,
                "idle_timeout_seconds": self.config.idle_timeout_seconds,
            },
        )
        return engine

    def close(self) -> None:
        """
        R: Dispose the pool.

        Safe to call even if the pool was never opened.
        """
        with self._lock:
            if self._pool is not None:
                logger.info("Closing connection pool")
                try:
                    self._pool.dispose()
                finally:
                    self._pool = None
                logger.info("Connection pool closed")
