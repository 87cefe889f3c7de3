"""
Name: Microsoft SQL Integration

Responsibilities:
  - Lifecycle hooks: register (open the pool, validating the configuration)
    and unregister (close the pool)
  - Dispatch table from action name to its input schema and use case
  - Shape action outputs the way the bot platform expects

Collaborators:
  - domain.services.ConnectionPoolProvider: the process's pool manager
  - application.use_cases: one use case per action
  - schemas: action input validation

Constraints:
  - createTable/dropTable return {}; the other actions return {"result": ...}
  - Unknown action names and invalid inputs raise ValidationError
"""

from typing import Any, Callable, Dict, Mapping, Tuple, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .application.use_cases import (
    CreateTableUseCase,
    DeleteDataUseCase,
    DropTableUseCase,
    InsertDataUseCase,
    QueryDataUseCase,
    UpdateDataUseCase,
)
from .domain.entities import OperationResult
from .domain.services import ConnectionPoolProvider
from .exceptions import ValidationError
from .logger import logger
from .schemas import (
    CreateTableReq,
    DeleteDataReq,
    DropTableReq,
    InsertDataReq,
    QueryDataReq,
    UpdateDataReq,
)

# R: action name -> (input schema, use case, output shaper)
ActionEntry = Tuple[Type[BaseModel], Any, Callable[[OperationResult], dict]]


def _empty_output(result: OperationResult) -> dict:
    return {}


def _result_output(result: OperationResult) -> dict:
    return {"result": result.to_dict()}


class MicrosoftSqlIntegration:
    """R: The integration the bot platform talks to."""

    def __init__(
        self,
        pool_provider: ConnectionPoolProvider,
        *,
        create_table: CreateTableUseCase,
        drop_table: DropTableUseCase,
        insert_data: InsertDataUseCase,
        update_data: UpdateDataUseCase,
        delete_data: DeleteDataUseCase,
        query_data: QueryDataUseCase,
    ):
        self.pool_provider = pool_provider
        self.actions: Dict[str, ActionEntry] = {
            "createTable": (CreateTableReq, create_table, _empty_output),
            "dropTable": (DropTableReq, drop_table, _empty_output),
            "insertData": (InsertDataReq, insert_data, _result_output),
            "updateData": (UpdateDataReq, update_data, _result_output),
            "deleteData": (DeleteDataReq, delete_data, _result_output),
            "queryData": (QueryDataReq, query_data, _result_output),
        }

    def register(self) -> None:
        """
        R: Open the pool once so a bad configuration is reported at registration.

        Raises:
            ConnectionFailure: If SQL Server cannot be reached with the configuration
        """
        self.pool_provider.acquire()
        logger.info("Integration registered")

    def unregister(self) -> None:
        """R: Release every pooled connection."""
        self.pool_provider.close()
        logger.info("Integration unregistered")

    def run_action(self, name: str, payload: Mapping[str, Any]) -> dict:
        """
        R: Validate payload for action name, run it and shape the output.

        Raises:
            ValidationError: Unknown action or invalid input
            ConnectionFailure: Pool could not be opened
            OperationFailure: The statement failed
        """
        entry = self.actions.get(name)
        if entry is None:
            raise ValidationError(f"Unknown action: {name}")
        schema, use_case, shape = entry

        try:
            request = schema.model_validate(payload)
        except PydanticValidationError as exc:
            first = exc.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            raise ValidationError(
                f"Invalid input for {name}: {location}: {first['msg']}"
            ) from exc

        return shape(use_case.execute(request.to_input()))
