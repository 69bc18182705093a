""" Opaque cursors: base64-encoded JSON arrays of sort key values

A cursor points to a row's position within a specific sort order.
It contains the row's values for every sort key column, in the sort key's column order:

    ["2024-01-01T00:00:00", 16]  ->  'WyIyMDI0LTAxLTAxVDAwOjAwOjAwIiwgMTZd'

The length and the order of the array are tied to the sort key.
Changing a sort key's columns invalidates every cursor issued for it.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Union
from uuid import UUID

from cursorable import exc
from cursorable.typing import SARowDict
from cursorable.sortkey import ColumnSort, SortKeySpec, SortingDirection


@dataclass(frozen=True)
class CursorPart:
    """ One decoded cursor value, together with its column's sort options """
    column: str
    value: Any
    column_sort: ColumnSort

    @property
    def direction(self) -> SortingDirection:
        return self.column_sort.direction

    @property
    def reversible(self) -> bool:
        return self.column_sort.reversible

    @property
    def timestamp(self) -> bool:
        return self.column_sort.timestamp

    @property
    def modifier(self) -> Optional[str]:
        return self.column_sort.modifier


# Decoded cursor: positionally aligned with the sort key's columns
CursorPayload = tuple[CursorPart, ...]


def encode_cursor(row: SARowDict, sort_key: SortKeySpec) -> str:
    """ Make an opaque cursor that points to `row` within the `sort_key` ordering

    Raises:
        KeyError: the row has no value for a sort key column
    """
    values = [_json_value(row[column.column], column) for column in sort_key.columns]
    return base64.b64encode(json.dumps(values, default=_json_default).encode()).decode()


def decode_cursor(sort_key: SortKeySpec, cursor: str) -> CursorPayload:
    """ Decode an opaque cursor into values aligned with the sort key's columns

    Raises:
        exc.InvalidCursor: not base64, not JSON, not an array of scalars, or the wrong number of values
    """
    # Decode
    try:
        decoded = base64.b64decode(cursor.encode(), validate=True)
        values = json.loads(decoded)
    except (binascii.Error, UnicodeError, ValueError, AttributeError) as e:
        # binascii.Error: not base64
        # json.JSONDecodeError, UnicodeDecodeError: both are ValueError
        # AttributeError: not a string at all
        raise exc.InvalidCursor(cursor, 'malformed encoding') from e

    # Validate
    if not isinstance(values, list):
        raise exc.InvalidCursor(cursor, 'not an array')
    if len(values) != len(sort_key):
        raise exc.InvalidCursor(cursor, f'expected {len(sort_key)} values for sort key {sort_key.name!r}, got {len(values)}')
    if any(isinstance(value, (dict, list)) for value in values):
        raise exc.InvalidCursor(cursor, 'not a scalar value')

    # Zip with the sort key
    return tuple(
        CursorPart(
            column=column.column,
            value=_python_value(cursor, value, column),
            column_sort=column,
        )
        for column, value in zip(sort_key.columns, values)
    )


def cursor_values(payload: CursorPayload) -> tuple:
    """ Get the plain value tuple from a decoded cursor """
    return tuple(part.value for part in payload)


def _json_value(value: Any, column: ColumnSort) -> Any:
    """ Prepare a row value for JSON """
    if column.timestamp and isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def _python_value(cursor: str, value: Any, column: ColumnSort) -> Any:
    """ Convert a JSON value back into the column's value """
    if column.timestamp and value is not None:
        if not isinstance(value, str):
            raise exc.InvalidCursor(cursor, f'expected a timestamp for {column.column!r}, got {value!r}')
        try:
            return _parse_timestamp(value)
        except ValueError as e:
            raise exc.InvalidCursor(cursor, f'expected a timestamp for {column.column!r}, got {value!r}') from e
    return value


def _parse_timestamp(value: str) -> Union[date, datetime]:
    """ Parse an ISO-8601 string made by isoformat(): a date, or a datetime """
    # Date only: "2024-01-02"
    if len(value) == 10:
        return date.fromisoformat(value)
    return datetime.fromisoformat(value)


def _json_default(value: Any) -> Any:
    """ JSON encoder for non-JSON scalars """
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    elif isinstance(value, (Decimal, UUID)):
        return str(value)
    raise TypeError(f'Cannot put {type(value).__name__} into a cursor')


class CursorCodec:
    """ Cursor encoder/decoder """
    encode = staticmethod(encode_cursor)
    decode = staticmethod(decode_cursor)
    values = staticmethod(cursor_values)
