"""
Name: Create Table Use Case

Responsibilities:
  - Parse the JSON table schema and create the table

Collaborators:
  - application.payloads.parse_table_schema
  - application.statements.create_table
"""

from dataclasses import dataclass

from ...domain.entities import OperationResult
from ...logger import logger
from .. import payloads, statements
from .sql_action import SqlActionUseCase


@dataclass
class CreateTableInput:
    """
    R: Input for createTable.

    Attributes:
        table_name: Table to create (optionally schema-qualified)
        data: JSON object mapping column name to SQL type
    """

    table_name: str
    data: str


class CreateTableUseCase(SqlActionUseCase):
    """R: Create a table from a column -> type mapping."""

    action_name = "createTable"

    def execute(self, input_data: CreateTableInput) -> OperationResult:
        logger.info(f"Creating table: {input_data.table_name}")

        result = self._run(
            lambda: statements.create_table(
                input_data.table_name, payloads.parse_table_schema(input_data.data)
            ),
            f"Failed to create table {input_data.table_name}",
        )

        logger.info("Table created successfully")
        return result
