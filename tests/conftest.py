"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure test environment (MSSQL_* variables)
  - Reset cached singletons between tests
  - Provide reusable fakes for the pool and executor

Collaborators:
  - pytest: Test framework
  - unittest.mock: Mocking library

Notes:
  - Fixtures are auto-discovered by pytest
"""

import os
from unittest.mock import MagicMock

import pytest

# R: Set required env vars BEFORE importing integration modules
os.environ.setdefault("MSSQL_USER", "sa")
os.environ.setdefault("MSSQL_PASSWORD", "test-password")
os.environ.setdefault("MSSQL_DATABASE", "testdb")

from mssql_integration import container  # noqa: E402
from mssql_integration.config import get_settings  # noqa: E402
from mssql_integration.domain.entities import (  # noqa: E402
    ConnectionConfig,
    OperationResult,
)
from mssql_integration.domain.errors import ClassifiedError, ErrorCategory  # noqa: E402


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (require a running SQL Server)"
    )


@pytest.fixture(autouse=True)
def reset_singletons():
    """Clear settings and container caches before and after each test."""
    caches = [
        get_settings,
        container.get_pool_manager,
        container.get_create_table_use_case,
        container.get_drop_table_use_case,
        container.get_insert_data_use_case,
        container.get_update_data_use_case,
        container.get_delete_data_use_case,
        container.get_query_data_use_case,
        container.get_integration,
    ]
    for cache in caches:
        cache.cache_clear()
    yield
    for cache in caches:
        cache.cache_clear()


@pytest.fixture
def connection_config() -> ConnectionConfig:
    """R: A configuration pointing at a local default instance."""
    return ConnectionConfig(
        user="sa",
        password="test-password",
        host="localhost",
        database="testdb",
        port=1433,
    )


@pytest.fixture
def mock_pool_provider() -> MagicMock:
    """R: Pool provider whose acquire() returns a sentinel pool."""
    provider = MagicMock()
    provider.acquire.return_value = MagicMock(name="pool")
    return provider


@pytest.fixture
def mock_executor() -> MagicMock:
    """R: Executor that reports one affected row."""
    return MagicMock(return_value=OperationResult(rows_affected=[1]))


@pytest.fixture
def mock_reporter() -> MagicMock:
    return MagicMock(
        return_value=ClassifiedError(ErrorCategory.UNKNOWN, None, "Unknown SQL error: x")
    )
