from .entities import ConnectionConfig, OperationRequest, OperationResult
from .errors import (
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

__all__ = [
    "ConnectionConfig",
    "OperationRequest",
    "OperationResult",
    "CauseEntry",
    "ClassifiedError",
    "ErrorCategory",
    "ConnectionErrorCode",
    "TransactionErrorCode",
    "RequestErrorCode",
    "PreparedStatementErrorCode",
    "DriverError",
    "DriverConnectionError",
    "DriverTransactionError",
    "DriverRequestError",
    "DriverPreparedStatementError",
]
