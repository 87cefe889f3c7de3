"""
Name: Action Payload Parsing

Responsibilities:
  - Parse the JSON strings the bot platform sends (table schema, rows, fields)
  - Reject malformed or empty payloads with ValidationError

Collaborators:
  - pydantic.TypeAdapter: JSON decoding + shape validation
  - exceptions.ValidationError

Constraints:
  - Runs before any pool interaction
"""

from typing import Any, Dict, List

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError

_SCHEMA_ADAPTER = TypeAdapter(Dict[str, str])
_ROWS_ADAPTER = TypeAdapter(List[Dict[str, Any]])
_FIELDS_ADAPTER = TypeAdapter(Dict[str, Any])


def _parse(adapter: TypeAdapter, raw: str, what: str):
    try:
        return adapter.validate_json(raw)
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid {what}: {exc.errors()[0]['msg']}") from exc


def parse_table_schema(raw: str) -> Dict[str, str]:
    """R: Parse {"column": "SQL type", ...}; at least one column."""
    schema = _parse(_SCHEMA_ADAPTER, raw, "table schema")
    if not schema:
        raise ValidationError("Table schema must define at least one column")
    return schema


def parse_rows(raw: str) -> List[Dict[str, Any]]:
    """
    R: Parse a JSON array of row objects.

    Every row must have the same keys so the rows can share one statement.
    """
    rows = _parse(_ROWS_ADAPTER, raw, "row data")
    if not rows:
        raise ValidationError("Row data must contain at least one row")

    keys = set(rows[0])
    if not keys:
        raise ValidationError("Rows must have at least one column")
    for index, row in enumerate(rows[1:], start=2):
        if set(row) != keys:
            raise ValidationError(
                f"Row {index} has different columns than row 1"
            )
    return rows


def parse_fields(raw: str) -> Dict[str, Any]:
    """R: Parse a JSON object of column -> new value; at least one field."""
    fields = _parse(_FIELDS_ADAPTER, raw, "update data")
    if not fields:
        raise ValidationError("Update data must contain at least one field")
    return fields
