"""
Name: Driver Error Translation

Responsibilities:
  - Convert pymssql DB-API errors and SQLAlchemy pool errors into the
    DriverError variants (connection, transaction, request, prepared statement)
  - Extract SQL Server diagnostics (number, state, class, line, server, procedure)
  - Split pymssql's concatenated DB-Lib messages into preceding errors

Collaborators:
  - pymssql: DB-API exceptions raised by the driver
  - sqlalchemy.exc: pool and connection-state errors
  - domain.errors: the variants produced here

Constraints:
  - translate_driver_error never raises
  - The raw exception is always kept as original_error

Notes:
  - pymssql errors carry (number, message) in args[0]; the chained _mssql
    exception carries state/severity/line/srvname/procname attributes
  - DB-Lib numbers (200xx) describe client-side link failures
"""

import re
from enum import Enum
from typing import Any, Optional

import pymssql
from sqlalchemy import exc as sa_exc

from ...domain.errors import (
    ConnectionErrorCode,
    DriverConnectionError,
    DriverError,
    DriverPreparedStatementError,
    DriverRequestError,
    DriverTransactionError,
    PreparedStatementErrorCode,
    RequestErrorCode,
    TransactionErrorCode,
)


class DriverPhase(str, Enum):
    """R: What the driver was doing when it failed."""

    CONNECT = "connect"
    REQUEST = "request"
    BATCH = "batch"
    TRANSACTION = "transaction"


# R: SQL Server login/database-access failures
LOGIN_ERROR_NUMBERS = {18452, 18456, 18470, 18486, 18487, 18488, 4060, 4064}

# R: DB-Lib client error numbers
DBLIB_CONNECTION_FAILED = 20002
DBLIB_TIMEOUT = 20003
DBLIB_READ_FAILED = 20004
DBLIB_WRITE_FAILED = 20006
DBLIB_UNABLE_TO_CONNECT = 20009
DBLIB_SERVER_NOT_FOUND = 20012
DBLIB_UNKNOWN_HOST = 20013
DBLIB_UNEXPECTED_EOF = 20017
DBLIB_GENERAL_SERVER_ERROR = 20018
DBLIB_DEAD_PROCESS = 20047

SOCKET_ERROR_NUMBERS = {
    DBLIB_CONNECTION_FAILED,
    DBLIB_READ_FAILED,
    DBLIB_WRITE_FAILED,
    DBLIB_UNABLE_TO_CONNECT,
    DBLIB_UNEXPECTED_EOF,
}
INSTANCE_LOOKUP_NUMBERS = {DBLIB_SERVER_NOT_FOUND, DBLIB_UNKNOWN_HOST}

TRANSACTION_ERROR_CODES = {
    3902: TransactionErrorCode.NOT_BEGUN,
    3903: TransactionErrorCode.NOT_BEGUN,
    3988: TransactionErrorCode.REQUEST_IN_PROGRESS,
    1205: TransactionErrorCode.ABORTED,
    3998: TransactionErrorCode.ABORTED,
    266: TransactionErrorCode.ABORTED,
}
CANCEL_ERROR_NUMBERS = {3617, 3980}
NOT_PREPARED_ERROR_NUMBERS = {8179}

_DBLIB_BLOCK = re.compile(r"DB-Lib error message (\d+), severity (\d+):\n([^\n]*)")


def _decode(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _number_and_text(exc: BaseException) -> tuple[Optional[int], str]:
    """
    R: Read (number, message) the way pymssql packs it.

    pymssql raises e.g. OperationalError((18456, b"Login failed ...")).
    """
    args = getattr(exc, "args", ())
    if args and isinstance(args[0], tuple) and len(args[0]) == 2:
        number, text = args[0]
        if isinstance(number, int):
            return number, _decode(text)
    if len(args) == 2 and isinstance(args[0], int):
        return args[0], _decode(args[1])
    number = getattr(exc, "number", None)
    return (number if isinstance(number, int) else None), _decode(exc)


def _server_details(exc: BaseException) -> dict:
    """R: Collect _mssql diagnostics from the exception or its chained cause."""
    for candidate in (exc, exc.__cause__, exc.__context__):
        if candidate is not None and hasattr(candidate, "srvname"):
            return {
                "state": getattr(candidate, "state", None),
                "severity": getattr(candidate, "severity", None),
                "line_number": getattr(candidate, "line", None),
                "server_name": _decode(getattr(candidate, "srvname", "") or "") or None,
                "procedure_name": _decode(getattr(candidate, "procname", "") or "") or None,
            }
    return {}


def _split_message(text: str) -> tuple[str, list[tuple[int, str]]]:
    """
    R: Separate the server text from the DB-Lib blocks pymssql appends.

    Returns:
        (primary message, [(dblib number, dblib text), ...])
    """
    head, _, _ = text.partition("DB-Lib error message")
    blocks = [
        (int(number), line.strip())
        for number, _severity, line in _DBLIB_BLOCK.findall(text)
        if int(number) != DBLIB_GENERAL_SERVER_ERROR
    ]
    primary = head.strip()
    if not primary and blocks:
        primary = blocks[0][1]
        blocks = blocks[1:]
    return primary or text.strip(), blocks


def _dedupe(blocks: list[tuple[int, str]]) -> list[tuple[int, str]]:
    seen = set()
    unique = []
    for block in blocks:
        if block not in seen:
            seen.add(block)
            unique.append(block)
    return unique


def _connection_code(numbers: list[int]) -> Optional[ConnectionErrorCode]:
    for number in numbers:
        if number in LOGIN_ERROR_NUMBERS:
            return ConnectionErrorCode.LOGIN
        if number == DBLIB_TIMEOUT:
            return ConnectionErrorCode.TIMEOUT
        if number in INSTANCE_LOOKUP_NUMBERS:
            return ConnectionErrorCode.INSTANCE_LOOKUP
        if number == DBLIB_DEAD_PROCESS:
            return ConnectionErrorCode.CONNECTION_CLOSED
        if number in SOCKET_ERROR_NUMBERS:
            return ConnectionErrorCode.SOCKET
    return None


def _translate_sqlalchemy(exc: BaseException) -> Optional[DriverError]:
    if isinstance(exc, sa_exc.TimeoutError):
        return DriverConnectionError(
            str(exc), ConnectionErrorCode.TIMEOUT, original_error=exc
        )
    if isinstance(exc, sa_exc.NoSuchModuleError):
        return DriverConnectionError(
            str(exc), ConnectionErrorCode.DRIVER, original_error=exc
        )
    if isinstance(exc, sa_exc.ResourceClosedError):
        return DriverConnectionError(
            str(exc), ConnectionErrorCode.CONNECTION_CLOSED, original_error=exc
        )
    if isinstance(exc, sa_exc.InvalidRequestError):
        text = str(exc).lower()
        if "already begun" in text:
            return DriverTransactionError(
                str(exc), TransactionErrorCode.ALREADY_BEGUN, original_error=exc
            )
        if "not begun" in text or "no transaction" in text:
            return DriverTransactionError(
                str(exc), TransactionErrorCode.NOT_BEGUN, original_error=exc
            )
    return None


def _translate_pymssql(exc: BaseException, phase: DriverPhase) -> DriverError:
    number, text = _number_and_text(exc)
    message, blocks = _split_message(text)
    blocks = _dedupe(blocks)
    numbers = ([number] if number is not None else []) + [n for n, _ in blocks]
    link_code = _connection_code(numbers)

    if phase is DriverPhase.CONNECT:
        if link_code is None and isinstance(exc, pymssql.InterfaceError):
            link_code = ConnectionErrorCode.DRIVER
        return DriverConnectionError(
            message,
            link_code,
            original_error=exc,
            preceding_errors=[
                DriverConnectionError(line, _connection_code([n]))
                for n, line in blocks
            ],
        )

    preceding = [DriverError(line) for _, line in blocks]

    if isinstance(exc, pymssql.InterfaceError):
        return DriverRequestError(
            message, RequestErrorCode.NO_CONNECTION, original_error=exc
        )
    if DBLIB_TIMEOUT in numbers:
        return DriverRequestError(
            message, RequestErrorCode.TIMEOUT, original_error=exc,
            preceding_errors=preceding,
        )
    if link_code is not None and link_code is not ConnectionErrorCode.LOGIN:
        return DriverConnectionError(
            message, link_code, original_error=exc, preceding_errors=preceding
        )
    if number in TRANSACTION_ERROR_CODES:
        return DriverTransactionError(
            message, TRANSACTION_ERROR_CODES[number], original_error=exc,
            preceding_errors=preceding,
        )
    if number in CANCEL_ERROR_NUMBERS:
        return DriverRequestError(
            message, RequestErrorCode.CANCELLED, original_error=exc,
            preceding_errors=preceding,
        )
    if number in NOT_PREPARED_ERROR_NUMBERS:
        return DriverPreparedStatementError(
            message, PreparedStatementErrorCode.NOT_PREPARED, original_error=exc,
            preceding_errors=preceding,
        )

    if phase is DriverPhase.TRANSACTION:
        return DriverTransactionError(
            message, original_error=exc, preceding_errors=preceding
        )

    code = RequestErrorCode.SERVER_MESSAGE if number is not None else None
    return DriverRequestError(
        message,
        code,
        original_error=exc,
        preceding_errors=preceding,
        number=number,
        **_server_details(exc),
    )


def translate_driver_error(exc: BaseException, phase: DriverPhase) -> DriverError:
    """
    R: Map any exception raised while talking to SQL Server to a DriverError.

    Args:
        exc: Raised exception (pymssql, SQLAlchemy, or anything else)
        phase: What the driver was doing

    Returns:
        The matching DriverError variant (unknown DriverError if none match)
    """
    if isinstance(exc, DriverError):
        return exc

    # R: SQLAlchemy wraps DB-API errors; translate the driver's own error
    if isinstance(exc, sa_exc.DBAPIError) and exc.orig is not None:
        return translate_driver_error(exc.orig, phase)

    if isinstance(exc, sa_exc.SQLAlchemyError):
        translated = _translate_sqlalchemy(exc)
        if translated is not None:
            return translated

    if isinstance(exc, pymssql.Error):
        return _translate_pymssql(exc, phase)

    if isinstance(exc, ImportError):
        return DriverConnectionError(
            str(exc), ConnectionErrorCode.DRIVER, original_error=exc
        )

    # R: Parameter binding failures happen client-side before the server sees SQL
    if isinstance(exc, (KeyError, TypeError, ValueError)):
        if phase is DriverPhase.BATCH:
            return DriverPreparedStatementError(
                str(exc), PreparedStatementErrorCode.BAD_ARGS, original_error=exc
            )
        if phase is DriverPhase.REQUEST:
            return DriverRequestError(
                str(exc), RequestErrorCode.BAD_ARGS, original_error=exc
            )

    if phase is DriverPhase.CONNECT:
        return DriverConnectionError(str(exc) or type(exc).__name__, original_error=exc)

    return DriverError(str(exc) or type(exc).__name__, original_error=exc)
