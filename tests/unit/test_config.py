"""
Unit tests for config.py (Settings validation).

Tests:
  - Required MSSQL_* variables and defaults
  - Port, pool size and timeout validation
  - ConnectionConfig construction (named instance)

Note:
  - Uses monkeypatch to set environment variables
  - _env_file=None keeps a developer's .env out of the tests
"""

import pytest
from pydantic import ValidationError

from mssql_integration.config import Settings, get_settings

pytestmark = pytest.mark.unit


class TestSettings:
    """Test Settings class validation."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.user == "sa"
        assert settings.database == "testdb"
        assert settings.host == "localhost"
        assert settings.port == 1433
        assert settings.pool_idle_timeout_seconds == 30.0
        assert settings.pool_size == 10

    def test_reads_prefixed_env(self, monkeypatch):
        monkeypatch.setenv("MSSQL_HOST", "db.internal")
        monkeypatch.setenv("MSSQL_PORT", "14330")
        monkeypatch.setenv("MSSQL_POOL_IDLE_TIMEOUT_SECONDS", "5")

        settings = Settings(_env_file=None)

        assert settings.host == "db.internal"
        assert settings.port == 14330
        assert settings.pool_idle_timeout_seconds == 5.0

    def test_missing_required(self, monkeypatch):
        monkeypatch.delenv("MSSQL_DATABASE", raising=False)

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    @pytest.mark.parametrize("port", ["0", "70000", "-1"])
    def test_invalid_port(self, monkeypatch, port):
        monkeypatch.setenv("MSSQL_PORT", port)

        with pytest.raises(ValidationError, match="port must be between 1 and 65535"):
            Settings(_env_file=None)

    @pytest.mark.parametrize(
        "name",
        [
            "MSSQL_POOL_SIZE",
            "MSSQL_LOGIN_TIMEOUT_SECONDS",
            "MSSQL_POOL_IDLE_TIMEOUT_SECONDS",
        ],
    )
    def test_non_positive_rejected(self, monkeypatch, name):
        monkeypatch.setenv(name, "0")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_negative_query_timeout_rejected(self, monkeypatch):
        monkeypatch.setenv("MSSQL_QUERY_TIMEOUT_SECONDS", "-1")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_log_level_normalized(self, monkeypatch):
        monkeypatch.setenv("MSSQL_LOG_LEVEL", "debug")

        assert Settings(_env_file=None).log_level == "DEBUG"

    def test_unknown_log_level_rejected(self, monkeypatch):
        monkeypatch.setenv("MSSQL_LOG_LEVEL", "LOUD")

        with pytest.raises(ValidationError, match="log_level must be one of"):
            Settings(_env_file=None)

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestConnectionConfig:
    def test_default_instance(self):
        config = Settings(_env_file=None).connection_config()

        assert config.server == "localhost"
        assert config.instance_name is None
        assert config.idle_timeout_seconds == 30.0

    def test_named_instance(self, monkeypatch):
        monkeypatch.setenv("MSSQL_INSTANCE_NAME", "SQLEXPRESS")

        config = Settings(_env_file=None).connection_config()

        assert config.server == "localhost\\SQLEXPRESS"

    def test_password_not_in_repr(self):
        config = Settings(_env_file=None).connection_config()

        assert "test-password" not in repr(config)
