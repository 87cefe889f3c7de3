"""
Name: SQL Statement Construction

Responsibilities:
  - Build CREATE/DROP/INSERT/UPDATE/DELETE statements for the actions
  - Quote identifiers and keep values in named parameters

Collaborators:
  - domain.entities.OperationRequest: the built statement + parameters
  - domain.errors.DriverRequestError: raised for suspicious WHERE clauses

Constraints:
  - Table names may be schema-qualified ("dbo.Users"); each part is bracket-quoted
  - Column keys must be regular identifiers because they are parameter names
  - WHERE conditions are free-form SQL; separators and comments outside
    string literals and bracketed identifiers are refused

Notes:
  - Placeholders use the driver's pyformat style: %(name)s
"""

import re
from typing import Any, Dict, List, Mapping

from ..domain.entities import OperationRequest
from ..domain.errors import DriverRequestError, RequestErrorCode
from ..exceptions import ValidationError

_REGULAR_IDENTIFIER = re.compile(r"^[A-Za-z_@#][A-Za-z0-9_@#$]*$")
_UNSAFE_FRAGMENT = re.compile(r";|--|/\*|\*/")
# R: '...' string literals ('' escapes) and [...] identifiers (]] escapes)
_QUOTED_SPAN = re.compile(r"'(?:[^']|'')*'|\[(?:[^\]]|\]\])*\]")


def _has_unsafe_fragment(sql: str) -> bool:
    """R: Look for separators or comments outside quoted literals and identifiers."""
    return bool(_UNSAFE_FRAGMENT.search(_QUOTED_SPAN.sub(" ", sql)))


def quote_identifier(name: str) -> str:
    """R: Bracket-quote one identifier, escaping closing brackets."""
    if not name or not name.strip():
        raise ValidationError("Identifier must not be empty")
    return "[" + name.replace("]", "]]") + "]"


def quote_table_name(name: str) -> str:
    """R: Quote a possibly schema-qualified table name."""
    if not name or not name.strip():
        raise ValidationError("Table name must not be empty")
    return ".".join(quote_identifier(part.strip()) for part in name.split("."))


def _check_column_key(key: str) -> str:
    if not _REGULAR_IDENTIFIER.match(key):
        raise ValidationError(f"Invalid column name: {key!r}")
    return key


def _check_conditions(conditions: str) -> str:
    conditions = (conditions or "").strip()
    if not conditions:
        raise ValidationError("Conditions must not be empty")
    if _has_unsafe_fragment(conditions):
        raise DriverRequestError(
            "Conditions contain a statement separator or comment",
            RequestErrorCode.INJECTION,
        )
    return conditions


def create_table(table_name: str, schema: Mapping[str, str]) -> OperationRequest:
    columns = []
    for column, column_type in schema.items():
        _check_column_key(column)
        if not column_type.strip() or _has_unsafe_fragment(column_type):
            raise ValidationError(f"Invalid type for column {column!r}")
        columns.append(f"{quote_identifier(column)} {column_type.strip()}")
    return OperationRequest(
        statement=f"CREATE TABLE {quote_table_name(table_name)} ({', '.join(columns)})"
    )


def drop_table(table_name: str) -> OperationRequest:
    return OperationRequest(statement=f"DROP TABLE {quote_table_name(table_name)}")


def insert_rows(table_name: str, rows: List[Dict[str, Any]]) -> OperationRequest:
    """
    R: One batched INSERT executed once per row.

    Rows must share the same keys (see payloads.parse_rows).
    """
    if not rows:
        raise ValidationError("Row data must contain at least one row")
    keys = [_check_column_key(key) for key in rows[0]]
    # R: Parameters are substituted with %, so a literal % must be doubled
    table = quote_table_name(table_name).replace("%", "%%")
    column_list = ", ".join(quote_identifier(key) for key in keys)
    placeholders = ", ".join(f"%({key})s" for key in keys)
    return OperationRequest(
        statement=(
            f"INSERT INTO {table} ({column_list}) "
            f"VALUES ({placeholders})"
        ),
        batch=[{key: row[key] for key in keys} for row in rows],
    )


def update_rows(
    table_name: str, fields: Mapping[str, Any], conditions: str
) -> OperationRequest:
    """R: Parameterized UPDATE; parameter names equal the field keys."""
    if not fields:
        raise ValidationError("Update data must contain at least one field")
    assignments = ", ".join(
        f"{quote_identifier(_check_column_key(key))} = %({key})s" for key in fields
    )
    table = quote_table_name(table_name).replace("%", "%%")
    where = _check_conditions(conditions).replace("%", "%%")
    return OperationRequest(
        statement=f"UPDATE {table} SET {assignments} WHERE {where}",
        parameters=dict(fields),
    )


def delete_rows(table_name: str, conditions: str) -> OperationRequest:
    return OperationRequest(
        statement=(
            f"DELETE FROM {quote_table_name(table_name)} "
            f"WHERE {_check_conditions(conditions)}"
        )
    )


def raw_query(query: str) -> OperationRequest:
    if not query or not query.strip():
        raise ValidationError("Query must not be empty")
    return OperationRequest(statement=query)
