"""
Name: Domain Entities

Responsibilities:
  - Define the records that flow through an action (ConnectionConfig,
    OperationRequest, OperationResult)
  - Provide type safety for the application layer

Collaborators:
  - None (pure domain layer, no external dependencies)

Constraints:
  - No dependencies on infrastructure or frameworks
  - ConnectionConfig is frozen; it is supplied once and never mutated

Notes:
  - OperationResult mirrors the result object the bot platform expects
    (rowsAffected, recordset, recordsets, output)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence


@dataclass(frozen=True)
class ConnectionConfig:
    """
    R: Immutable connection settings for one SQL Server database.

    Attributes:
        user: Login name
        password: Login password (excluded from repr)
        host: Server host name
        database: Database name
        port: TCP port
        instance_name: Named instance, resolved instead of the port when set
        login_timeout_seconds: Connect timeout
        query_timeout_seconds: Statement timeout (0 = no timeout)
        idle_timeout_seconds: Idle time before a pooled connection is replaced
        pool_size: Connections kept by the pool
    """

    user: str
    password: str = field(repr=False)
    host: str
    database: str
    port: int = 1433
    instance_name: Optional[str] = None
    login_timeout_seconds: int = 15
    query_timeout_seconds: int = 0
    idle_timeout_seconds: float = 30.0
    pool_size: int = 10

    @property
    def server(self) -> str:
        """Server string in the driver's host[\\instance] form."""
        if self.instance_name:
            return f"{self.host}\\{self.instance_name}"
        return self.host


@dataclass(frozen=True)
class OperationRequest:
    """
    R: One SQL statement plus its parameters.

    Attributes:
        statement: SQL text using named (pyformat) placeholders
        parameters: Named parameters for a single execution
        batch: Parameter sets for a batched write (one execution per set)
    """

    statement: str
    parameters: Optional[Mapping[str, Any]] = None
    batch: Optional[Sequence[Mapping[str, Any]]] = None

    @property
    def is_batch(self) -> bool:
        return self.batch is not None


@dataclass
class OperationResult:
    """
    R: Result of one executed request, passed through to the caller.

    Attributes:
        rows_affected: One count per statement/batch
        recordset: First record set (None when the statement returned no rows)
        recordsets: Every record set, in order
        output: Named output values
    """

    rows_affected: List[int] = field(default_factory=list)
    recordset: Optional[List[Dict[str, Any]]] = None
    recordsets: List[List[Dict[str, Any]]] = field(default_factory=list)
    output: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "rowsAffected": list(self.rows_affected),
            "recordset": self.recordset,
            "recordsets": self.recordsets,
            "output": self.output,
        }
