# Contains class for projecting JSON onto flat relational tables
import logging
from typing import Dict, Tuple

from .coercion import ValueType, coerce_value, to_json_text
from .nodes import NodeKind, is_container, kind_of
from .tables import (
    VALUE_COLUMN,
    ColumnRole,
    Table,
    default_id_store,
    key_column_name,
)

logger = logging.getLogger(__name__)

# Immutable chain of (table_name, row_id) pairs from the main record down
Ancestors = Tuple[Tuple[str, int], ...]

# Kinds of work on the walk stack
_VISIT = "visit"
_ROW = "row"


def placeholder_table(name):
    """Single-column table with no rows, registered when a source can't be found."""
    table = Table(name)
    table.ensure_column(VALUE_COLUMN)
    return table


class RelationalMaterializer:
    """
    Walks the main record set and every structure nested below it, producing
    one table per distinct property name.

    Every child table gets a synthetic id column (`<name>Id`), a foreign key to
    the main record it descends from (`<main>Id`) and one foreign key for each
    table between it and the main record.
    """

    def __init__(self, id_store=None):
        # Child ids come from a store that outlives this materializer
        self.id_store = id_store or default_id_store
        self.main_table = None
        self.tables: Dict[str, Table] = {}  # Child tables by name
        self.coercion_failures = 0

    @property
    def main_key(self):
        return key_column_name(self.main_table.name)

    def materialize(self, main_node, main_table_name):
        """
        Build the main table and every table derived from it.

        Args:
            main_node: The main record set; an array of objects, or a single
                object treated as a one-element array
            main_table_name: Name of the main table

        Returns:
            tuple: (main_table, child_tables) where child_tables maps table
                names to tables, in discovery order
        """
        elements = main_node if kind_of(main_node) is NodeKind.ARRAY else [main_node]

        self.main_table = self._build_main_table(elements, main_table_name)

        # Main keys are 1-based ordinals, matching the rows built above
        for ordinal, element in enumerate(elements, start=1):
            if kind_of(element) is not NodeKind.OBJECT:
                continue
            for key, value in element.items():
                if is_container(value):
                    self._visit(value, key, ordinal, ())

        return self.main_table, self.tables

    def _build_main_table(self, elements, name):
        """Create the main table with its rows; its key is assigned 1..N."""
        table = Table(name)

        # First pass: every key seen on any element becomes a column
        for element in elements:
            if kind_of(element) is NodeKind.OBJECT:
                for key in element:
                    table.ensure_column(key)
            else:
                table.ensure_column(VALUE_COLUMN)

        # An existing "Id" property is taken over as the main key
        primary_key = key_column_name(name)
        if not table.has_column(primary_key) and table.has_column("Id"):
            table.rename_column("Id", primary_key)
        table.ensure_column(primary_key, ValueType.INT, ColumnRole.PRIMARY_KEY)

        for ordinal, element in enumerate(elements, start=1):
            if kind_of(element) is NodeKind.OBJECT:
                values = self._data_values(table, element)
            else:
                values = {VALUE_COLUMN: self._scalar_cell(table, element)}
            values[primary_key] = ordinal
            table.append_row(values)

        return table

    def _visit(self, node, name, main_id, ancestors: Ancestors):
        """
        Materialize `node` into table `name`, then everything nested below it.

        Runs off an explicit stack, so nesting depth is bounded by memory and
        not by the recursion limit. Work is pushed in reverse so tables are
        discovered and ids are drawn in document order, depth first.
        """
        # Items are (_VISIT, node, name, ancestors) or (_ROW, element, table, ancestors)
        stack = [(_VISIT, node, name, ancestors)]

        while stack:
            action, current, target, chain = stack.pop()
            if action == _VISIT:
                stack.extend(reversed(self._open_node(current, target, main_id, chain)))
            else:
                stack.extend(reversed(self._emit_element(current, target, main_id, chain)))

    def _open_node(self, node, name, main_id, ancestors: Ancestors):
        """Ensure the table for `node`; returns the work its rows still need."""
        if name.lower() == self.main_table.name.lower():
            logger.warning("Skipping nested property '%s': it shares the main table's name", name)
            return []

        kind = kind_of(node)

        if kind is NodeKind.ARRAY:
            objects = [element for element in node if kind_of(element) is NodeKind.OBJECT]
            data_keys = [key for element in objects for key in element]
            table = self._ensure_table(name, ancestors, data_keys,
                                       with_value=len(objects) < len(node))
            return [(_ROW, element, table, ancestors) for element in node]

        if kind is NodeKind.OBJECT:
            # A bare object is a one-row table
            table = self._ensure_table(name, ancestors, list(node))
            return [(_ROW, node, table, ancestors)]

        table = self._ensure_table(name, ancestors, [], with_value=True)
        return [(_ROW, node, table, ancestors)]

    def _emit_element(self, element, table, main_id, ancestors: Ancestors):
        """Append the row for one element; returns visits for its nested children."""
        if kind_of(element) is not NodeKind.OBJECT:
            value = to_json_text(element) if is_container(element) else element
            self._emit_row(table, {VALUE_COLUMN: self._scalar_cell(table, value)}, main_id, ancestors)
            return []

        row_id = self._emit_row(table, self._data_values(table, element), main_id, ancestors)
        chain = ancestors + ((table.name, row_id),)
        return [(_VISIT, value, key, chain) for key, value in element.items() if is_container(value)]

    def _ensure_table(self, name, ancestors: Ancestors, data_keys, with_value=False):
        """
        Get or create table `name` and widen it to cover the given keys.

        Columns are only ever added, never removed, so a name seen in several
        places ends up with the union of every shape it was seen with.
        """
        table = self.tables.get(name)
        if table is None:
            table = Table(name)
            self.tables[name] = table

        for key in data_keys:
            table.ensure_column(key)
        if with_value:
            table.ensure_column(VALUE_COLUMN)

        table.ensure_column(self.main_key, ValueType.INT, ColumnRole.FOREIGN_KEY)
        table.ensure_column(table.primary_key, ValueType.INT, ColumnRole.PRIMARY_KEY)
        for ancestor_name, _ in ancestors:
            foreign_key = key_column_name(ancestor_name)
            if foreign_key.lower() != table.primary_key.lower():
                table.ensure_column(foreign_key, ValueType.INT, ColumnRole.FOREIGN_KEY)

        return table

    def _emit_row(self, table, values, main_id, ancestors: Ancestors):
        """Append one row with its key columns filled in; returns the new row id."""
        values[self.main_key] = main_id
        for ancestor_name, ancestor_id in ancestors:
            values[key_column_name(ancestor_name)] = ancestor_id

        # Own id is written last so it wins over a same-named ancestor key
        row_id = self.id_store.next_id(table.name)
        values[table.primary_key] = row_id

        table.append_row(values)
        return row_id

    def _data_values(self, table, element):
        """Typed values for the data columns of `table` found on `element`."""
        values = {}
        for key, raw in element.items():
            column = table.get_column(key)
            if column is None or column.is_key:
                continue
            values[column.name] = self._coerce(table, column, raw)
        return values

    def _scalar_cell(self, table, raw):
        return self._coerce(table, table.get_column(VALUE_COLUMN), raw)

    def _coerce(self, table, column, raw):
        result = coerce_value(raw, column.value_type)
        if not result.ok:
            self.coercion_failures += 1
            logger.debug("Could not coerce %r for %s.%s to %s",
                         raw, table.name, column.name, column.value_type.value)
        return result.value
