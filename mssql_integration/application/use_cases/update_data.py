"""
Name: Update Data Use Case

Responsibilities:
  - Parse the JSON fields and run a parameterized UPDATE with the caller's
    WHERE condition

Collaborators:
  - application.payloads.parse_fields
  - application.statements.update_rows

Notes:
  - Parameter names equal the field keys
"""

from dataclasses import dataclass

from ...domain.entities import OperationResult
from ...logger import logger
from .. import payloads, statements
from .sql_action import SqlActionUseCase


@dataclass
class UpdateDataInput:
    """
    R: Input for updateData.

    Attributes:
        table_name: Target table
        data: JSON object of column -> new value
        conditions: SQL WHERE clause (without the WHERE keyword)
    """

    table_name: str
    data: str
    conditions: str


class UpdateDataUseCase(SqlActionUseCase):
    """R: Update rows matching a condition."""

    action_name = "updateData"

    def execute(self, input_data: UpdateDataInput) -> OperationResult:
        logger.info(f"Updating data in table: {input_data.table_name}")

        result = self._run(
            lambda: statements.update_rows(
                input_data.table_name,
                payloads.parse_fields(input_data.data),
                input_data.conditions,
            ),
            f"Failed to update data in {input_data.table_name}",
        )

        logger.info(
            "Data updated successfully",
            extra={"rows_affected": result.rows_affected},
        )
        return result
