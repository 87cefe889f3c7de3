"""
Name: Domain Service Interfaces

Responsibilities:
  - Define the ports the action use cases depend on (pool, executor, error reporter)

Collaborators:
  - infrastructure.db: PoolManager, execute, report_error implement these
  - application.use_cases: depend only on these protocols

Constraints:
  - Protocols only, no implementations
"""

from typing import Any, Protocol

from .entities import OperationRequest, OperationResult
from .errors import ClassifiedError


class ConnectionPoolProvider(Protocol):
    """R: Hands out the shared connection pool, opening it on first use."""

    def acquire(self) -> Any:
        """Raises ConnectionFailure if the pool cannot be opened."""
        ...

    def close(self) -> None:
        ...


class StatementExecutor(Protocol):
    """R: Runs one request on a pool."""

    def __call__(self, pool: Any, request: OperationRequest) -> OperationResult:
        ...


class ErrorReporter(Protocol):
    """R: Classifies and logs a failure; never raises."""

    def __call__(self, error: BaseException) -> ClassifiedError:
        ...
