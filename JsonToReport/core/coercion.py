# Contains value types and the coercion of raw JSON scalars into them
import datetime
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

import pandas as pd


class ValueType(Enum):
    """Declared type of a table column."""
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    DATETIME = "datetime"


# Value used when a cell cannot be coerced (or the property is missing)
FALLBACK_VALUES = {
    ValueType.STRING: "",
    ValueType.INT: None,
    ValueType.FLOAT: None,
    ValueType.BOOL: None,
    ValueType.DATETIME: None,
}

# Value written into padding rows
ZERO_VALUES = {
    ValueType.STRING: "",
    ValueType.INT: 0,
    ValueType.FLOAT: 0.0,
    ValueType.BOOL: False,
    ValueType.DATETIME: None,
}

_TRUE_STRINGS = {"true", "1", "yes", "si", "sí"}
_FALSE_STRINGS = {"false", "0", "no"}


@dataclass(frozen=True)
class CoercionResult:
    """Outcome of a coercion: `value` is always usable, `ok` tells if it is real."""
    ok: bool
    value: Any


def fallback_value(value_type):
    return FALLBACK_VALUES[value_type]


def zero_value(value_type):
    return ZERO_VALUES[value_type]


def _is_missing(raw):
    # pd.isna chokes on containers, so only ask it about scalars
    if isinstance(raw, (dict, list)):
        return False
    return raw is None or bool(pd.isna(raw))


def _to_string(raw):
    if isinstance(raw, bool):
        # JSON spelling rather than Python's True/False
        return "true" if raw else "false"
    if isinstance(raw, (dict, list)):
        # Nested content lives in its own child table
        return ""
    return str(raw)


def _to_int(raw):
    if isinstance(raw, bool):
        return int(raw)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if not raw.is_integer():
            raise ValueError(f"{raw} has a fractional part")
        return int(raw)
    return int(str(raw).strip())


def _to_float(raw):
    if isinstance(raw, bool):
        return float(raw)
    if isinstance(raw, (int, float)):
        return float(raw)
    return float(str(raw).strip())


def _to_bool(raw):
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, (int, float)):
        return raw != 0
    text = str(raw).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ValueError(f"'{raw}' is not a boolean")


def _to_datetime(raw):
    if isinstance(raw, (datetime.datetime, datetime.date)):
        return raw
    if isinstance(raw, (bool, int, float)):
        raise ValueError("numbers are not dates")
    return datetime.datetime.fromisoformat(str(raw).strip())


_CONVERTERS = {
    ValueType.STRING: _to_string,
    ValueType.INT: _to_int,
    ValueType.FLOAT: _to_float,
    ValueType.BOOL: _to_bool,
    ValueType.DATETIME: _to_datetime,
}


def coerce_value(raw, value_type=ValueType.STRING):
    """
    Convert a raw JSON scalar to the declared type of a column.

    Never raises. Missing values (None, NaN) and values that cannot be
    converted both produce the type's fallback value; only the latter
    report ok=False.

    Args:
        raw: The value read from the JSON document
        value_type: Declared ValueType of the target column

    Returns:
        CoercionResult: the converted (or fallback) value and a success flag
    """
    if _is_missing(raw):
        return CoercionResult(True, fallback_value(value_type))

    # Nested containers have no meaningful scalar form outside string columns
    if isinstance(raw, (dict, list)) and value_type is not ValueType.STRING:
        return CoercionResult(False, fallback_value(value_type))

    try:
        return CoercionResult(True, _CONVERTERS[value_type](raw))
    except (TypeError, ValueError, OverflowError):
        return CoercionResult(False, fallback_value(value_type))


def to_json_text(raw):
    """Serialize a container for display in a single cell; "" if it is too deep to encode."""
    try:
        return json.dumps(raw, ensure_ascii=False)
    except RecursionError:
        return ""
