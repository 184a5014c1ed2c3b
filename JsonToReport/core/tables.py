# Contains the table model produced by the materializer and the id counter store
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

import pandas as pd

from .coercion import ValueType, coerce_value, fallback_value, zero_value

VALUE_COLUMN = "Value"


def key_column_name(table_name):
    """Name of the synthetic id column of a table, and of FKs pointing at it."""
    return f"{table_name}Id"


class ColumnRole(Enum):
    DATA = "data"
    PRIMARY_KEY = "primary_key"
    FOREIGN_KEY = "foreign_key"


@dataclass
class Column:
    name: str
    value_type: ValueType = ValueType.STRING
    role: ColumnRole = ColumnRole.DATA

    @property
    def is_key(self):
        return self.role is not ColumnRole.DATA


class Table:
    """
    A flat, named table of rows.

    Column names are matched case-insensitively; the first spelling seen is
    the one kept. Every row holds a value for every column, so adding a
    column back-fills the rows that already exist.
    """

    def __init__(self, name):
        self.name = name
        self.columns: List[Column] = []
        self.rows: List[Dict[str, object]] = []
        self._columns_by_key: Dict[str, Column] = {}

    def __repr__(self):
        return f"Table({self.name!r}, columns={len(self.columns)}, rows={len(self.rows)})"

    def __len__(self):
        return len(self.rows)

    @property
    def column_names(self):
        return [column.name for column in self.columns]

    @property
    def primary_key(self):
        return key_column_name(self.name)

    def get_column(self, name) -> Optional[Column]:
        return self._columns_by_key.get(name.lower())

    def has_column(self, name):
        return name.lower() in self._columns_by_key

    def ensure_column(self, name, value_type=ValueType.STRING, role=ColumnRole.DATA):
        """
        Add a column unless one with the same (case-insensitive) name exists.

        An existing data column that is later claimed as a key takes the key's
        type and role, so synthetic keys always win over same-named JSON
        properties.

        Returns:
            Column: the existing or newly added column
        """
        column = self.get_column(name)
        if column is None:
            column = Column(name, value_type, role)
            self.columns.append(column)
            self._columns_by_key[name.lower()] = column
            # Back-fill rows created before this column was discovered
            for row in self.rows:
                row[column.name] = fallback_value(value_type)
        elif role is not ColumnRole.DATA and column.role is ColumnRole.DATA:
            column.role = role
            column.value_type = value_type
            for row in self.rows:
                row[column.name] = coerce_value(row[column.name], value_type).value
        return column

    def rename_column(self, old_name, new_name):
        """Rename a column in place, keeping its position and the row values."""
        column = self.get_column(old_name)
        if column is None:
            raise KeyError(old_name)
        old_spelling = column.name
        del self._columns_by_key[old_spelling.lower()]
        column.name = new_name
        self._columns_by_key[new_name.lower()] = column
        for row in self.rows:
            row[new_name] = row.pop(old_spelling)
        return column

    def append_row(self, values=None, fill=fallback_value):
        """
        Append a row, keyed by the table's own column spellings.

        Args:
            values: Mapping of column name (any case) to an already-typed value
            fill: Callable giving the value for columns absent from `values`

        Returns:
            dict: the stored row
        """
        given = {}
        for key, value in (values or {}).items():
            given[key.lower()] = value

        row = {}
        for column in self.columns:
            key = column.name.lower()
            row[column.name] = given[key] if key in given else fill(column.value_type)
        self.rows.append(row)
        return row

    def append_padding_row(self, keys):
        """Append a row holding only key values; data columns get their zero value."""
        row = {}
        given = {key.lower(): value for key, value in keys.items()}
        for column in self.columns:
            key = column.name.lower()
            if key in given:
                row[column.name] = given[key]
            elif column.is_key:
                row[column.name] = None
            else:
                row[column.name] = zero_value(column.value_type)
        self.rows.append(row)
        return row

    def count_by(self, column_name):
        """Count rows per value of `column_name`."""
        column = self.get_column(column_name)
        counts: Dict[object, int] = {}
        if column is None:
            return counts
        for row in self.rows:
            value = row[column.name]
            counts[value] = counts.get(value, 0) + 1
        return counts

    def to_frame(self):
        """
        Convert the table to a pandas DataFrame in column order.

        Key and integer columns use the nullable Int64 dtype so padding rows
        with missing ancestor keys do not turn the column into floats.
        """
        frame = pd.DataFrame(self.rows, columns=self.column_names)
        for column in self.columns:
            if column.is_key or column.value_type is ValueType.INT:
                frame[column.name] = frame[column.name].astype("Int64")
            elif column.value_type is ValueType.STRING:
                frame[column.name] = frame[column.name].astype(object)
        return frame


class IdCounterStore:
    """
    Hands out synthetic ids per table name.

    Ids start at 1, only ever increase, and are never reused for the lifetime
    of the store. One lock guards every counter, so concurrent report requests
    sharing a store never receive the same id for the same table name.
    """

    def __init__(self):
        self._next_ids: Dict[str, int] = {}
        self._lock = threading.Lock()

    def next_id(self, table_name):
        with self._lock:
            next_id = self._next_ids.get(table_name, 1)
            self._next_ids[table_name] = next_id + 1
            return next_id

    def peek(self, table_name):
        """The id the next call to next_id would return."""
        with self._lock:
            return self._next_ids.get(table_name, 1)

    def reset(self):
        with self._lock:
            self._next_ids.clear()


# Shared by every request in the process unless a store is injected
default_id_store = IdCounterStore()
