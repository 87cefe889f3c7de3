"""
Name: Driver Error Variants

Responsibilities:
  - Define the closed family of driver errors (connection, transaction,
    request, prepared statement, unknown)
  - Give each family its own code enumeration
  - Define ClassifiedError, the diagnostic record built from a driver error

Collaborators:
  - infrastructure.db.errors: translates pymssql/SQLAlchemy errors into these
  - infrastructure.db.classifier: matches on these to build ClassifiedError

Constraints:
  - Pure domain module (no driver imports)
  - A code that is not part of the family's enum is kept as a plain string
    and classified with the family's generic message

Notes:
  - Codes follow the SQL Server client conventions (ELOGIN, EREQUEST, ...)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple, Union


class ErrorCategory(str, Enum):
    """R: Diagnostic category of a driver error."""

    CONNECTION = "connection"
    TRANSACTION = "transaction"
    REQUEST = "request"
    PREPARED_STATEMENT = "prepared-statement"
    UNKNOWN = "unknown"


class ConnectionErrorCode(str, Enum):
    LOGIN = "ELOGIN"
    TIMEOUT = "ETIMEOUT"
    DRIVER = "EDRIVER"
    ALREADY_CONNECTED = "EALREADYCONNECTED"
    ALREADY_CONNECTING = "EALREADYCONNECTING"
    NOT_OPEN = "ENOTOPEN"
    INSTANCE_LOOKUP = "EINSTLOOKUP"
    SOCKET = "ESOCKET"
    CONNECTION_CLOSED = "ECONNCLOSED"


class TransactionErrorCode(str, Enum):
    NOT_BEGUN = "ENOTBEGUN"
    ALREADY_BEGUN = "EALREADYBEGUN"
    REQUEST_IN_PROGRESS = "EREQINPROG"
    ABORTED = "EABORT"


class RequestErrorCode(str, Enum):
    SERVER_MESSAGE = "EREQUEST"
    CANCELLED = "ECANCEL"
    TIMEOUT = "ETIMEOUT"
    BAD_ARGS = "EARGS"
    INJECTION = "EINJECT"
    NO_CONNECTION = "ENOCONN"


class PreparedStatementErrorCode(str, Enum):
    BAD_ARGS = "EARGS"
    INJECTION = "EINJECT"
    ALREADY_PREPARED = "EALREADYPREPARED"
    NOT_PREPARED = "ENOTPREPARED"


def _coerce_code(enum_cls, code):
    """Return the enum member for code, or the raw value if it is not one."""
    if code is None or isinstance(code, enum_cls):
        return code
    try:
        return enum_cls(code)
    except ValueError:
        return code


class DriverError(Exception):
    """
    R: Base driver error; on its own it is the "unknown" variant.

    Attributes:
        message: Driver message text
        code: Family code (enum member, or raw string when unrecognized)
        original_error: The exception this error was derived from
        preceding_errors: Errors raised earlier in the same batch, in order
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN
    code_enum: Optional[type] = None

    def __init__(
        self,
        message: str,
        code: Union[str, Enum, None] = None,
        original_error: Optional[BaseException] = None,
        preceding_errors: Optional[Sequence[BaseException]] = None,
    ):
        self.message = message
        self.code = _coerce_code(self.code_enum, code) if self.code_enum else code
        self.original_error = original_error
        self.preceding_errors = list(preceding_errors or [])
        super().__init__(message)

    @property
    def code_value(self) -> Optional[str]:
        if isinstance(self.code, Enum):
            return self.code.value
        return self.code


class DriverConnectionError(DriverError):
    """Connecting, or the link to the server, failed."""

    category = ErrorCategory.CONNECTION
    code_enum = ConnectionErrorCode


class DriverTransactionError(DriverError):
    """Transaction state misuse or abort."""

    category = ErrorCategory.TRANSACTION
    code_enum = TransactionErrorCode


class DriverRequestError(DriverError):
    """
    R: A statement failed.

    When code is EREQUEST the server diagnostics are populated.
    """

    category = ErrorCategory.REQUEST
    code_enum = RequestErrorCode

    def __init__(
        self,
        message: str,
        code: Union[str, Enum, None] = None,
        original_error: Optional[BaseException] = None,
        preceding_errors: Optional[Sequence[BaseException]] = None,
        *,
        number: Optional[int] = None,
        state: Optional[int] = None,
        severity: Optional[int] = None,
        line_number: Optional[int] = None,
        server_name: Optional[str] = None,
        procedure_name: Optional[str] = None,
    ):
        super().__init__(message, code, original_error, preceding_errors)
        self.number = number
        self.state = state
        # R: SQL Server calls the severity the error "class"
        self.severity = severity
        self.line_number = line_number
        self.server_name = server_name
        self.procedure_name = procedure_name


class DriverPreparedStatementError(DriverError):
    """A prepared or batched statement failed."""

    category = ErrorCategory.PREPARED_STATEMENT
    code_enum = PreparedStatementErrorCode


@dataclass(frozen=True)
class CauseEntry:
    """R: One labelled entry of a cause chain ("Original error", "Preceding error 1")."""

    label: str
    text: str
    error: "ClassifiedError"


@dataclass(frozen=True)
class ClassifiedError:
    """
    R: Structured diagnostic derived from a raised error.

    Attributes:
        category: Error family
        code: Driver-specific symbol (None when absent)
        message: Human-readable text (never empty)
        details: Server diagnostics (number, state, class, ...) for EREQUEST
        cause_chain: Original cause and preceding errors, in report order
    """

    category: ErrorCategory
    code: Optional[str]
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    cause_chain: Tuple[CauseEntry, ...] = ()

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "code": self.code,
            "message": self.message,
            "details": dict(self.details),
            "cause_chain": [
                {
                    "label": entry.label,
                    "message": entry.text,
                    "category": entry.error.category.value,
                }
                for entry in self.cause_chain
            ],
        }
