"""
Name: Drop Table Use Case

Responsibilities:
  - Drop a table by name
"""

from dataclasses import dataclass

from ...domain.entities import OperationResult
from ...logger import logger
from .. import statements
from .sql_action import SqlActionUseCase


@dataclass
class DropTableInput:
    table_name: str


class DropTableUseCase(SqlActionUseCase):
    """R: Drop a table."""

    action_name = "dropTable"

    def execute(self, input_data: DropTableInput) -> OperationResult:
        logger.info(f"Dropping table: {input_data.table_name}")

        result = self._run(
            lambda: statements.drop_table(input_data.table_name),
            f"Failed to drop table {input_data.table_name}",
        )

        logger.info("Table dropped successfully")
        return result
