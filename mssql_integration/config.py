"""
Name: Integration Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Build the immutable ConnectionConfig handed to the pool manager

Collaborators:
  - container.py: builds the PoolManager from get_settings()
  - main.py: reads settings for logging and startup
  - domain.entities.ConnectionConfig: immutable connection record

Constraints:
  - No business logic, pure configuration
  - Password never appears in logs (see logger.SENSITIVE_KEYS)

Notes:
  - Environment variables use the MSSQL_ prefix (MSSQL_USER, MSSQL_PORT, ...)
  - Singleton via lru_cache
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.entities import ConnectionConfig

# R: Level names accepted by logging.Logger.setLevel
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """
    Integration settings loaded from environment variables.

    Attributes:
        user: Login name for SQL Server authentication
        password: Password for the login
        host: Server host name (default: localhost)
        instance_name: Named instance (resolved through SQL Browser)
        database: Database to connect to
        port: TCP port (ignored when instance_name is set)
        login_timeout_seconds: Timeout for establishing a connection
        query_timeout_seconds: Per-statement timeout (0 = driver default)
        pool_idle_timeout_seconds: Idle time before a pooled connection is replaced
        pool_size: Connections kept by the pool
        log_level: Root level for the integration logger
    """

    # Required (no defaults)
    user: str
    password: str
    database: str

    # Server location
    host: str = "localhost"
    instance_name: str = ""
    port: int = 1433

    # Timeouts
    login_timeout_seconds: int = 15
    query_timeout_seconds: int = 0

    # Database - Connection Pool
    pool_idle_timeout_seconds: float = 30.0
    pool_size: int = 10

    # Observability
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="MSSQL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("port")
    @classmethod
    def port_must_be_valid(cls, v: int) -> int:
        if not 0 < v < 65536:
            raise ValueError("port must be between 1 and 65535")
        return v

    @field_validator("pool_size", "login_timeout_seconds")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("value must be greater than 0")
        return v

    @field_validator("query_timeout_seconds")
    @classmethod
    def must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("query_timeout_seconds must be >= 0")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("pool_idle_timeout_seconds")
    @classmethod
    def idle_timeout_must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("pool_idle_timeout_seconds must be greater than 0")
        return v

    def connection_config(self) -> ConnectionConfig:
        """Freeze the connection-related settings into a ConnectionConfig."""
        return ConnectionConfig(
            user=self.user,
            password=self.password,
            host=self.host,
            database=self.database,
            port=self.port,
            instance_name=self.instance_name or None,
            login_timeout_seconds=self.login_timeout_seconds,
            query_timeout_seconds=self.query_timeout_seconds,
            idle_timeout_seconds=self.pool_idle_timeout_seconds,
            pool_size=self.pool_size,
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()
