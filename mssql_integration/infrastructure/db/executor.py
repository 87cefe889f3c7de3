"""
Name: Statement Executor

Responsibilities:
  - Run one OperationRequest on a pooled connection
  - Collect every result set, one rows-affected count per statement
  - Render binary column values as 0x-prefixed hex strings
  - Commit on success, roll back on failure
  - Translate driver failures into DriverError variants

Collaborators:
  - sqlalchemy Engine: raw_connection() checks out a pooled DB-API connection
  - pymssql cursor: execute/executemany/nextset
  - infrastructure.db.errors: translate_driver_error

Constraints:
  - Statements use pyformat placeholders (%(name)s)
  - Parameters are passed only when present, so a literal % in parameterless
    SQL is left alone
  - A rollback failure is logged and never masks the original error

Notes:
  - The connection goes back to the pool in all cases
"""

from typing import Any, Dict, List

from sqlalchemy.engine import Engine

from ...domain.entities import OperationRequest, OperationResult
from ...logger import logger
from .errors import DriverPhase, translate_driver_error


def _json_value(value: Any) -> Any:
    # R: BINARY/VARBINARY/IMAGE/ROWVERSION arrive as bytes; render them as 0x-hex
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return value


def _rows_from_cursor(cursor) -> List[Dict[str, Any]]:
    # R: Unnamed columns (e.g. COUNT(*)) are keyed by an empty string
    columns = [column[0] or "" for column in cursor.description]
    return [
        {column: _json_value(value) for column, value in zip(columns, row)}
        for row in cursor.fetchall()
    ]


def _collect_results(cursor) -> OperationResult:
    result = OperationResult()
    while True:
        if cursor.description:
            result.recordsets.append(_rows_from_cursor(cursor))
        result.rows_affected.append(max(cursor.rowcount, 0))
        if not cursor.nextset():
            break
    if result.recordsets:
        result.recordset = result.recordsets[0]
    return result


def _rollback(connection) -> None:
    try:
        connection.rollback()
    except Exception as exc:
        logger.warning("Rollback failed", extra={"error": str(exc)})


def execute(pool: Engine, request: OperationRequest) -> OperationResult:
    """
    R: Execute a request against the pool.

    Args:
        pool: Engine returned by PoolManager.acquire()
        request: Statement plus parameters (or a batch of parameter sets)

    Returns:
        OperationResult with rows affected and record sets

    Raises:
        DriverError: translated driver failure, chained to the original
    """
    try:
        connection = pool.raw_connection()
    except Exception as exc:
        raise translate_driver_error(exc, DriverPhase.CONNECT) from exc

    phase = DriverPhase.BATCH if request.is_batch else DriverPhase.REQUEST
    try:
        cursor = connection.cursor()
        try:
            if request.is_batch:
                cursor.executemany(request.statement, list(request.batch))
                result = OperationResult(rows_affected=[max(cursor.rowcount, 0)])
            elif request.parameters:
                cursor.execute(request.statement, dict(request.parameters))
                result = _collect_results(cursor)
            else:
                cursor.execute(request.statement)
                result = _collect_results(cursor)
        finally:
            cursor.close()

        phase = DriverPhase.TRANSACTION
        connection.commit()
        return result
    except Exception as exc:
        _rollback(connection)
        raise translate_driver_error(exc, phase) from exc
    finally:
        connection.close()
