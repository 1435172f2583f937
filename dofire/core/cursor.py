"""Opaque cursors for keyset pagination over investments."""

from __future__ import annotations

import base64
import binascii
import json
import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Mapping, Optional, Union

SortValue = Union[str, int, float]


class SortOption(str, Enum):
    ACQUIRED_AT_DESC = "acquired_at_desc"
    ACQUIRED_AT_ASC = "acquired_at_asc"
    AMOUNT_DESC = "amount_desc"
    AMOUNT_ASC = "amount_asc"

    @property
    def column(self) -> str:
        return "acquired_at" if self.value.startswith("acquired_at") else "amount"

    @property
    def descending(self) -> bool:
        return self.value.endswith("_desc")


@dataclass(frozen=True)
class CursorData:
    last_id: str
    last_sort_value: SortValue


def encode_cursor(data: CursorData) -> str:
    """Compact JSON, then URL-safe base64 with the padding stripped."""
    payload = json.dumps(
        {"last_id": data.last_id, "last_sort_value": data.last_sort_value},
        separators=(",", ":"),
    )
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii").rstrip("=")


def decode_cursor(cursor: Any) -> Optional[CursorData]:
    """Reverse encode_cursor. Anything malformed yields None, never an exception."""
    if not isinstance(cursor, str) or not cursor:
        return None

    padded = cursor + "=" * (-len(cursor) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        payload = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError):
        return None

    if not isinstance(payload, dict):
        return None

    last_id = payload.get("last_id")
    if not isinstance(last_id, str) or not last_id:
        return None

    if "last_sort_value" not in payload:
        return None
    last_sort_value = payload["last_sort_value"]
    # bool is an int subclass; reject it along with null/objects
    if isinstance(last_sort_value, bool) or not isinstance(last_sort_value, (str, int, float)):
        return None
    if isinstance(last_sort_value, float) and not math.isfinite(last_sort_value):
        return None

    return CursorData(last_id=last_id, last_sort_value=last_sort_value)


def sort_value_of(row: Mapping[str, Any], sort: SortOption) -> SortValue:
    value = row[sort.column]
    if isinstance(value, date):
        return value.isoformat()
    if sort.column == "amount":
        return float(value)
    return value


def cursor_for(row: Mapping[str, Any], sort: SortOption) -> CursorData:
    """Cursor pointing at ``row``, the last item of a page."""
    return CursorData(last_id=str(row["id"]), last_sort_value=sort_value_of(row, sort))


def matches_sort(cursor: CursorData, sort: SortOption) -> bool:
    """Whether the cursor's sort value has the shape the sort column needs."""
    value = cursor.last_sort_value
    if sort.column == "amount":
        return _is_number(value)
    if not isinstance(value, str):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_after(row: Mapping[str, Any], sort: SortOption, cursor: CursorData) -> bool:
    """
    True when ``row`` comes strictly after the cursor in ``sort`` order.

    The sort column is compared first; rows sharing the cursor's sort value
    fall back to ``id`` in the same direction.
    """
    value = sort_value_of(row, sort)
    anchor = cursor.last_sort_value
    if sort.column == "amount":
        anchor = float(anchor)
    else:
        anchor = str(anchor)

    row_id = str(row["id"])
    if sort.descending:
        return value < anchor or (value == anchor and row_id < cursor.last_id)
    return value > anchor or (value == anchor and row_id > cursor.last_id)


def keyset_filter(sort: SortOption, cursor: CursorData) -> str:
    """The is_after predicate as a PostgREST ``or`` filter expression."""
    op = "lt" if sort.descending else "gt"
    column = sort.column
    value = _postgrest_literal(cursor.last_sort_value)
    last_id = _postgrest_literal(cursor.last_id)
    return f"{column}.{op}.{value},and({column}.eq.{value},id.{op}.{last_id})"


def _postgrest_literal(value: SortValue) -> str:
    text = str(value)
    # reserved characters in PostgREST logic trees need double quotes
    if any(ch in text for ch in ',()."\\') and not _is_number(value):
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return text


def _is_number(value: SortValue) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
