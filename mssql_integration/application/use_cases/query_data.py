"""
Name: Query Data Use Case

Responsibilities:
  - Run caller-supplied SQL and return every record set

Constraints:
  - The query text is passed to the server unchanged
"""

from dataclasses import dataclass

from ...domain.entities import OperationResult
from ...logger import logger
from .. import statements
from .sql_action import SqlActionUseCase


@dataclass
class QueryDataInput:
    query: str


class QueryDataUseCase(SqlActionUseCase):
    """R: Execute a raw SQL query."""

    action_name = "queryData"

    def execute(self, input_data: QueryDataInput) -> OperationResult:
        logger.info("Executing query")

        result = self._run(
            lambda: statements.raw_query(input_data.query),
            "Failed to execute query",
        )

        logger.info(
            "Query executed successfully",
            extra={
                "rows_affected": result.rows_affected,
                "recordsets": len(result.recordsets),
            },
        )
        return result
