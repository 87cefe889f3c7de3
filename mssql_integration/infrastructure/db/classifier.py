"""
Name: Driver Error Classifier

Responsibilities:
  - Map any error raised during a database operation to a ClassifiedError
    (category, code, human-readable message, server details, cause chain)
  - Log the classification line by line (report_error)

Collaborators:
  - domain.errors: DriverError variants and ClassifiedError
  - infrastructure.db.errors: translates raw pymssql/SQLAlchemy errors first
  - logger.py: structured logging

Constraints:
  - classify never raises and always returns a non-empty message
  - Classification is diagnostic only; callers still raise their failure
  - Causes are followed one level (the original error is not expanded further)

Notes:
  - Category order: connection, transaction, request, prepared statement, unknown
  - Messages follow the SQL Server client's error code descriptions
"""

import logging
from typing import Optional

import pymssql
from sqlalchemy import exc as sa_exc

from ...domain.errors import (
    CauseEntry,
    ClassifiedError,
    ConnectionErrorCode,
    DriverConnectionError,
    DriverError,
    DriverPreparedStatementError,
    DriverRequestError,
    DriverTransactionError,
    ErrorCategory,
    PreparedStatementErrorCode,
    RequestErrorCode,
    TransactionErrorCode,
)
from .errors import DriverPhase, translate_driver_error


CONNECTION_MESSAGES = {
    ConnectionErrorCode.LOGIN: "Login failed for user.",
    ConnectionErrorCode.TIMEOUT: "Connection timeout.",
    ConnectionErrorCode.DRIVER: "Unknown driver.",
    ConnectionErrorCode.ALREADY_CONNECTED: "Database is already connected!",
    ConnectionErrorCode.ALREADY_CONNECTING: "Already connecting to database!",
    ConnectionErrorCode.NOT_OPEN: "Connection not yet open.",
    ConnectionErrorCode.INSTANCE_LOOKUP: "Instance lookup failed.",
    ConnectionErrorCode.SOCKET: "Socket error.",
    ConnectionErrorCode.CONNECTION_CLOSED: "Connection is closed.",
}

TRANSACTION_MESSAGES = {
    TransactionErrorCode.NOT_BEGUN: "Transaction has not begun.",
    TransactionErrorCode.ALREADY_BEGUN: "Transaction has already begun.",
    TransactionErrorCode.REQUEST_IN_PROGRESS: (
        "Can't commit/rollback transaction. There is a request in progress."
    ),
    TransactionErrorCode.ABORTED: "Transaction has been aborted.",
}

REQUEST_MESSAGES = {
    RequestErrorCode.SERVER_MESSAGE: "Message from SQL Server.",
    RequestErrorCode.CANCELLED: "Request cancelled.",
    RequestErrorCode.TIMEOUT: "Request timeout.",
    RequestErrorCode.BAD_ARGS: "Invalid number of arguments.",
    RequestErrorCode.INJECTION: "SQL injection warning.",
    RequestErrorCode.NO_CONNECTION: "No connection is specified for that request.",
}

PREPARED_STATEMENT_MESSAGES = {
    PreparedStatementErrorCode.BAD_ARGS: (
        "Invalid number of arguments for prepared statement."
    ),
    PreparedStatementErrorCode.INJECTION: "SQL injection warning for prepared statement.",
    PreparedStatementErrorCode.ALREADY_PREPARED: "Statement is already prepared.",
    PreparedStatementErrorCode.NOT_PREPARED: "Statement is not prepared.",
}


def _error_text(error: BaseException) -> str:
    try:
        text = getattr(error, "message", None) or str(error)
    except Exception:
        text = ""
    return text or type(error).__name__


def _server_details(error: DriverRequestError) -> dict:
    return {
        "number": error.number,
        "state": error.state,
        "class": error.severity,
        "line_number": error.line_number,
        "server": error.server_name,
        "procedure": error.procedure_name,
    }


def _categorize(error: DriverError) -> ClassifiedError:
    """R: One match per category; an unrecognized code gets the generic message."""
    text = _error_text(error)
    code = error.code_value

    match error:
        case DriverConnectionError():
            message = CONNECTION_MESSAGES.get(error.code, f"Connection error: {text}")
            return ClassifiedError(ErrorCategory.CONNECTION, code, message)
        case DriverTransactionError():
            message = TRANSACTION_MESSAGES.get(error.code, f"Transaction error: {text}")
            return ClassifiedError(ErrorCategory.TRANSACTION, code, message)
        case DriverRequestError():
            message = REQUEST_MESSAGES.get(error.code, f"Request error: {text}")
            details = {}
            if error.code is RequestErrorCode.SERVER_MESSAGE:
                details = _server_details(error)
            return ClassifiedError(ErrorCategory.REQUEST, code, message, details)
        case DriverPreparedStatementError():
            message = PREPARED_STATEMENT_MESSAGES.get(
                error.code, f"Prepared statement error: {text}"
            )
            return ClassifiedError(ErrorCategory.PREPARED_STATEMENT, code, message)
        case _:
            return ClassifiedError(
                ErrorCategory.UNKNOWN, code, f"Unknown SQL error: {text}"
            )


def _as_driver_error(error: BaseException) -> DriverError:
    if isinstance(error, DriverError):
        return error
    if isinstance(error, (pymssql.Error, sa_exc.SQLAlchemyError)):
        return translate_driver_error(error, DriverPhase.REQUEST)
    return DriverError(_error_text(error), original_error=error)


def _classify(error: BaseException, follow_causes: bool) -> ClassifiedError:
    driver_error = _as_driver_error(error)
    result = _categorize(driver_error)
    if not follow_causes:
        return result

    chain: list[CauseEntry] = []

    original: Optional[BaseException] = driver_error.original_error
    # R: A translated error's original is the input itself; nothing new to report
    if original is not None and original is not error:
        chain.append(
            CauseEntry("Original error", _error_text(original), _classify(original, False))
        )

    for index, preceding in enumerate(driver_error.preceding_errors, start=1):
        chain.append(
            CauseEntry(
                f"Preceding error {index}",
                _error_text(preceding),
                _classify(preceding, False),
            )
        )

    return ClassifiedError(
        result.category, result.code, result.message, result.details, tuple(chain)
    )


def classify(error: BaseException) -> ClassifiedError:
    """
    R: Classify an error raised during a database operation.

    Args:
        error: Any exception (DriverError variants, pymssql, SQLAlchemy, other)

    Returns:
        ClassifiedError; never raises
    """
    try:
        return _classify(error, True)
    except Exception:
        return ClassifiedError(
            ErrorCategory.UNKNOWN, None, f"Unknown SQL error: {_error_text(error)}"
        )


def report_error(error: BaseException, log: logging.Logger) -> ClassifiedError:
    """
    R: Classify error and log every line of the diagnostic.

    Returns:
        The ClassifiedError (the caller decides what to raise)
    """
    classified = classify(error)
    extra = {"category": classified.category.value, "code": classified.code}

    log.error(classified.message, extra=extra)

    details = classified.details
    if details:
        log.error(
            f"Error number: {details['number']}, state: {details['state']}, "
            f"class: {details['class']}, line number: {details['line_number']}, "
            f"server: {details['server']}, procedure: {details['procedure']}",
            extra=extra,
        )

    for entry in classified.cause_chain:
        log.error(f"{entry.label}: {entry.text}", extra=extra)

    return classified
