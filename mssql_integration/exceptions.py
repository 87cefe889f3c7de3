"""
Name: Custom Exceptions and Error Handling

Responsibilities:
  - Define the failures an action can surface (validation, connection, operation)
  - Carry the classification of the underlying driver error
  - Generate unique error IDs for tracking

Collaborators:
  - exception_handlers.py: maps these to HTTP problem responses
  - infrastructure.db.classifier: supplies the ClassifiedError they carry

Constraints:
  - Every failure carries error_code, message and error_id
  - The driver error is kept as original_error; it is never swallowed

Notes:
  - error_id is UUID for log correlation
"""

from typing import Optional
from uuid import uuid4

from .domain.errors import ClassifiedError


class IntegrationError(Exception):
    """Base exception for the integration."""

    error_code: str = "INTEGRATION_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
        classified: Optional[ClassifiedError] = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        self.classified = classified
        super().__init__(message)

    @property
    def category(self) -> str | None:
        """Classified category value ("request", "connection", ...), if any."""
        if self.classified is None:
            return None
        return self.classified.category.value


class ValidationError(IntegrationError):
    """Action input rejected before any database interaction."""

    error_code: str = "VALIDATION_ERROR"


class ConnectionFailure(IntegrationError):
    """The connection pool could not be opened."""

    error_code: str = "CONNECTION_FAILURE"


class OperationFailure(IntegrationError):
    """A statement failed after a pool was obtained."""

    error_code: str = "OPERATION_FAILURE"
