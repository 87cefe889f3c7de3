"""
Name: Connection Pool Manager Tests

Responsibilities:
  - Test lazy opening and reuse of the single pool
  - Test connect failures (ConnectionFailure, nothing retained, retry on next call)
  - Test concurrent first use builds one pool
  - Test close/reopen and idle connection expiry

Notes:
  - build_engine is patched; no SQL Server is needed
  - Idle expiry runs against an in-memory SQLite QueuePool
"""

import sqlite3
import threading
from dataclasses import replace
from unittest.mock import MagicMock, patch

import pymssql
import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import QueuePool

from mssql_integration.exceptions import ConnectionFailure
from mssql_integration.infrastructure.db import pool as pool_module
from mssql_integration.infrastructure.db.pool import PoolManager

pytestmark = pytest.mark.unit

LOGIN_FAILED = pymssql.OperationalError(
    (
        18456,
        b"Login failed for user 'sa'.DB-Lib error message 20018, severity 14:\n"
        b"General SQL Server error: Check messages from the SQL Server\n"
        b"DB-Lib error message 20002, severity 9:\n"
        b"Adaptive Server connection failed (localhost)\n",
    )
)


@pytest.fixture
def mock_engine():
    return MagicMock(name="engine")


class TestAcquire:
    """Test lazy open and reuse."""

    def test_first_acquire_opens_pool(self, connection_config, mock_engine):
        manager = PoolManager(connection_config)
        assert manager.is_open is False

        with patch.object(pool_module, "build_engine", return_value=mock_engine) as build:
            result = manager.acquire()

        assert result is mock_engine
        assert manager.is_open is True
        build.assert_called_once_with(connection_config)
        mock_engine.connect.assert_called_once()

    def test_second_acquire_returns_same_pool(self, connection_config, mock_engine):
        manager = PoolManager(connection_config)

        with patch.object(pool_module, "build_engine", return_value=mock_engine) as build:
            first = manager.acquire()
            second = manager.acquire()

        assert first is second
        build.assert_called_once()

    def test_concurrent_first_acquire_builds_once(self, connection_config, mock_engine):
        manager = PoolManager(connection_config)
        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(manager.acquire())

        with patch.object(pool_module, "build_engine", return_value=mock_engine) as build:
            threads = [threading.Thread(target=worker) for _ in range(8)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

        build.assert_called_once()
        assert len(results) == 8
        assert all(result is mock_engine for result in results)


class TestAcquireFailure:
    """Test connect failures."""

    def test_login_failure_raises_connection_failure(
        self, connection_config, mock_engine
    ):
        mock_engine.connect.side_effect = LOGIN_FAILED
        manager = PoolManager(connection_config)

        with patch.object(pool_module, "build_engine", return_value=mock_engine):
            with pytest.raises(ConnectionFailure) as exc_info:
                manager.acquire()

        failure = exc_info.value
        assert failure.message.startswith("Failed to connect to Microsoft SQL Server, ")
        assert "Login failed for user 'sa'." in failure.message
        assert failure.category == "connection"
        assert failure.classified.code == "ELOGIN"
        assert failure.__cause__ is LOGIN_FAILED

    def test_failure_disposes_engine_and_retains_nothing(
        self, connection_config, mock_engine
    ):
        mock_engine.connect.side_effect = LOGIN_FAILED
        manager = PoolManager(connection_config)

        with patch.object(pool_module, "build_engine", return_value=mock_engine):
            with pytest.raises(ConnectionFailure):
                manager.acquire()

        mock_engine.dispose.assert_called_once()
        assert manager.is_open is False

    def test_next_acquire_retries_after_failure(self, connection_config):
        failing = MagicMock(name="failing")
        failing.connect.side_effect = LOGIN_FAILED
        working = MagicMock(name="working")
        manager = PoolManager(connection_config)

        with patch.object(
            pool_module, "build_engine", side_effect=[failing, working]
        ) as build:
            with pytest.raises(ConnectionFailure):
                manager.acquire()
            result = manager.acquire()

        assert result is working
        assert build.call_count == 2

    def test_unreachable_host_is_socket_error(self, connection_config, mock_engine):
        mock_engine.connect.side_effect = pymssql.OperationalError(
            (
                20009,
                b"DB-Lib error message 20009, severity 9:\n"
                b"Unable to connect: Adaptive Server is unavailable or does not exist (nohost)\n",
            )
        )
        manager = PoolManager(connection_config)

        with patch.object(pool_module, "build_engine", return_value=mock_engine):
            with pytest.raises(ConnectionFailure) as exc_info:
                manager.acquire()

        assert exc_info.value.classified.code == "ESOCKET"


class TestClose:
    """Test close and reopen."""

    def test_close_disposes_pool(self, connection_config, mock_engine):
        manager = PoolManager(connection_config)

        with patch.object(pool_module, "build_engine", return_value=mock_engine):
            manager.acquire()
        manager.close()

        mock_engine.dispose.assert_called_once()
        assert manager.is_open is False

    def test_close_without_open_is_noop(self, connection_config):
        manager = PoolManager(connection_config)

        manager.close()
        manager.close()

        assert manager.is_open is False

    def test_acquire_after_close_opens_new_pool(self, connection_config):
        first, second = MagicMock(name="first"), MagicMock(name="second")
        manager = PoolManager(connection_config)

        with patch.object(pool_module, "build_engine", side_effect=[first, second]):
            assert manager.acquire() is first
            manager.close()
            assert manager.acquire() is second


class TestConnectArguments:
    """Test how pymssql.connect is called."""

    def test_default_instance_passes_port(self, connection_config):
        with patch.object(pool_module.pymssql, "connect") as connect:
            pool_module._connect(connection_config)

        kwargs = connect.call_args.kwargs
        assert kwargs["server"] == "localhost"
        assert kwargs["port"] == "1433"
        assert kwargs["user"] == "sa"
        assert kwargs["database"] == "testdb"

    def test_named_instance_omits_port(self, connection_config):
        config = replace(connection_config, instance_name="SQLEXPRESS")

        with patch.object(pool_module.pymssql, "connect") as connect:
            pool_module._connect(config)

        kwargs = connect.call_args.kwargs
        assert kwargs["server"] == "localhost\\SQLEXPRESS"
        assert "port" not in kwargs


class TestIdleTimeout:
    """Test that connections idle past the timeout are replaced."""

    @pytest.fixture
    def sqlite_engine(self):
        engine = create_engine(
            "sqlite://",
            creator=lambda: sqlite3.connect(":memory:", check_same_thread=False),
            poolclass=QueuePool,
            pool_size=1,
            max_overflow=0,
        )
        yield engine
        engine.dispose()

    def _dbapi_connection(self, engine):
        raw = engine.raw_connection()
        try:
            return raw.dbapi_connection
        finally:
            raw.close()

    def test_connection_reused_within_timeout(self, sqlite_engine, monkeypatch):
        now = [1000.0]
        monkeypatch.setattr(pool_module, "_clock", lambda: now[0])
        pool_module._install_idle_timeout(sqlite_engine, 30.0)

        first = self._dbapi_connection(sqlite_engine)
        now[0] += 10.0
        second = self._dbapi_connection(sqlite_engine)

        assert first is second

    def test_connection_replaced_after_timeout(self, sqlite_engine, monkeypatch):
        now = [1000.0]
        monkeypatch.setattr(pool_module, "_clock", lambda: now[0])
        pool_module._install_idle_timeout(sqlite_engine, 30.0)

        first = self._dbapi_connection(sqlite_engine)
        now[0] += 31.0
        second = self._dbapi_connection(sqlite_engine)

        assert first is not second
