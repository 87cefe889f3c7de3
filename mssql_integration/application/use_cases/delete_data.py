"""
Name: Delete Data Use Case

Responsibilities:
  - Delete rows matching the caller's WHERE condition
"""

from dataclasses import dataclass

from ...domain.entities import OperationResult
from ...logger import logger
from .. import statements
from .sql_action import SqlActionUseCase


@dataclass
class DeleteDataInput:
    table_name: str
    conditions: str


class DeleteDataUseCase(SqlActionUseCase):
    """R: Delete rows matching a condition."""

    action_name = "deleteData"

    def execute(self, input_data: DeleteDataInput) -> OperationResult:
        logger.info(f"Deleting data from table: {input_data.table_name}")

        result = self._run(
            lambda: statements.delete_rows(
                input_data.table_name, input_data.conditions
            ),
            f"Failed to delete data from {input_data.table_name}",
        )

        logger.info(
            "Data deleted successfully",
            extra={"rows_affected": result.rows_affected},
        )
        return result
