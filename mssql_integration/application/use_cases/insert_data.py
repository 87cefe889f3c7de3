"""
Name: Insert Data Use Case

Responsibilities:
  - Parse a JSON array of rows and write them in one batched INSERT

Collaborators:
  - application.payloads.parse_rows
  - application.statements.insert_rows

Constraints:
  - An empty array is a ValidationError raised before the pool is touched
"""

from dataclasses import dataclass

from ...domain.entities import OperationResult
from ...logger import logger
from .. import payloads, statements
from .sql_action import SqlActionUseCase


@dataclass
class InsertDataInput:
    """
    R: Input for insertData.

    Attributes:
        table_name: Target table
        data: JSON array of row objects sharing the same keys
    """

    table_name: str
    data: str


class InsertDataUseCase(SqlActionUseCase):
    """R: Insert rows into a table."""

    action_name = "insertData"

    def execute(self, input_data: InsertDataInput) -> OperationResult:
        logger.info(f"Inserting data into table: {input_data.table_name}")

        result = self._run(
            lambda: statements.insert_rows(
                input_data.table_name, payloads.parse_rows(input_data.data)
            ),
            f"Failed to insert data into {input_data.table_name}",
        )

        logger.info(
            "Data inserted successfully",
            extra={"rows_affected": result.rows_affected},
        )
        return result
