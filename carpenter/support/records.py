"""Helpers for reading fields out of raw records.

Records are whatever a store driver returns: mappings (dict, sqlite3 rows
converted to dict) or plain objects. Keys may be dotted to reach nested
values, e.g. ``author.name``.
"""

from collections.abc import Mapping
from datetime import date, time
from decimal import Decimal
from numbers import Real
from typing import Any


def get_field(record: Any, key: str, default: Any = None) -> Any:
    """Read ``key`` from a record, following dots into nested values."""
    if isinstance(record, Mapping) and key in record:
        return record[key]

    value = record
    for part in key.split("."):
        if value is None:
            return default
        if isinstance(value, Mapping):
            if part not in value:
                return default
            value = value[part]
        else:
            value = getattr(value, part, default)
    return value


def default_label(key: str) -> str:
    """Turn a field key into a display label (``created_at`` -> ``Created At``)."""
    return key.replace(".", " ").replace("_", " ").strip().title()


def matches_filter(value: Any, expected: Any) -> bool:
    """Check a field value against one filter term.

    Strings match case-insensitively as substrings; anything else must be
    equal. Empty terms always match.
    """
    if expected is None or expected == "":
        return True
    if isinstance(expected, str):
        if value is None:
            return False
        return expected.lower() in str(value).lower()
    return value == expected


def sort_key(value: Any) -> tuple:
    """Total sort key for values of mixed types.

    None sorts first, then numbers, then strings, then dates and times.
    Any other value is ordered by type name and its string form, so a
    column holding ``10`` and ``"N/A"`` still sorts.
    """
    if value is None:
        return (0, "", 0)
    if isinstance(value, (Real, Decimal)):
        return (1, "", value)
    if isinstance(value, str):
        return (2, "", value)
    if isinstance(value, (date, time)):
        return (3, type(value).__name__, value)
    return (4, type(value).__name__, str(value))
