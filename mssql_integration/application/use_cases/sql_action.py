"""
Name: SQL Action Base

Responsibilities:
  - Shared flow of every action: build the request, acquire the pool,
    execute, and turn a failure into an OperationFailure
  - Keep the action name in the logging context while it runs

Collaborators:
  - domain.services: ConnectionPoolProvider, StatementExecutor, ErrorReporter
  - exceptions: OperationFailure

Constraints:
  - ValidationError from building propagates untouched (no pool interaction)
  - ConnectionFailure from acquire propagates untouched
  - Every other failure is reported, then raised as OperationFailure
  - Nothing is retried; the pool is left in place after a failure
"""

from typing import Callable

from ...context import action_var
from ...domain.entities import OperationRequest, OperationResult
from ...domain.errors import DriverError
from ...domain.services import (
    ConnectionPoolProvider,
    ErrorReporter,
    StatementExecutor,
)
from ...exceptions import OperationFailure
from ...logger import logger


class SqlActionUseCase:
    """R: Base class for the table/query actions."""

    action_name: str = ""

    def __init__(
        self,
        pool_provider: ConnectionPoolProvider,
        executor: StatementExecutor,
        error_reporter: ErrorReporter,
    ):
        self.pool_provider = pool_provider
        self.executor = executor
        self.error_reporter = error_reporter

    def _failure(self, exc: BaseException, description: str) -> OperationFailure:
        classified = self.error_reporter(exc)
        detail = exc.message if isinstance(exc, DriverError) else str(exc)
        return OperationFailure(
            f"{description}: {detail}",
            original_error=exc,
            classified=classified,
        )

    def _run(
        self, build: Callable[[], OperationRequest], description: str
    ) -> OperationResult:
        token = action_var.set(self.action_name)
        try:
            try:
                request = build()
            except DriverError as exc:
                raise self._failure(exc, description) from exc

            pool = self.pool_provider.acquire()

            try:
                return self.executor(pool, request)
            except Exception as exc:
                raise self._failure(exc, description) from exc
        except OperationFailure as exc:
            logger.error(exc.message, extra={"error_id": exc.error_id})
            raise
        finally:
            action_var.reset(token)
