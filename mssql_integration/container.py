"""
Name: Dependency Injection Container

Responsibilities:
  - Wire up dependencies for the integration
  - Own the single PoolManager of the process
  - Provide factory functions for the action use cases

Collaborators:
  - config.get_settings: connection configuration
  - infrastructure.db: PoolManager, execute, report_error
  - application.use_cases: the six action use cases
  - FastAPI Depends(): dependency injection mechanism

Constraints:
  - Manual DI (no library like dependency-injector)
  - Singletons via functools.lru_cache

Notes:
  - This is the composition root; use cases only see domain.services protocols
  - Tests override get_integration through app.dependency_overrides
"""

from functools import lru_cache

from .application.use_cases import (
    CreateTableUseCase,
    DeleteDataUseCase,
    DropTableUseCase,
    InsertDataUseCase,
    QueryDataUseCase,
    UpdateDataUseCase,
)
from .config import get_settings
from .domain.errors import ClassifiedError
from .infrastructure.db import PoolManager, execute, report_error
from .integration import MicrosoftSqlIntegration
from .logger import logger


# R: Pool manager factory (singleton, one pool per process)
@lru_cache
def get_pool_manager() -> PoolManager:
    """
    R: Get the process's PoolManager.

    The pool itself is opened lazily on the first acquire().
    """
    return PoolManager(get_settings().connection_config())


def _report(error: BaseException) -> ClassifiedError:
    return report_error(error, logger)


def _use_case_args() -> tuple:
    return (get_pool_manager(), execute, _report)


@lru_cache
def get_create_table_use_case() -> CreateTableUseCase:
    return CreateTableUseCase(*_use_case_args())


@lru_cache
def get_drop_table_use_case() -> DropTableUseCase:
    return DropTableUseCase(*_use_case_args())


@lru_cache
def get_insert_data_use_case() -> InsertDataUseCase:
    return InsertDataUseCase(*_use_case_args())


@lru_cache
def get_update_data_use_case() -> UpdateDataUseCase:
    return UpdateDataUseCase(*_use_case_args())


@lru_cache
def get_delete_data_use_case() -> DeleteDataUseCase:
    return DeleteDataUseCase(*_use_case_args())


@lru_cache
def get_query_data_use_case() -> QueryDataUseCase:
    return QueryDataUseCase(*_use_case_args())


@lru_cache
def get_integration() -> MicrosoftSqlIntegration:
    """R: Get singleton integration wired with every action."""
    return MicrosoftSqlIntegration(
        get_pool_manager(),
        create_table=get_create_table_use_case(),
        drop_table=get_drop_table_use_case(),
        insert_data=get_insert_data_use_case(),
        update_data=get_update_data_use_case(),
        delete_data=get_delete_data_use_case(),
        query_data=get_query_data_use_case(),
    )
