# Contains class for equalizing row counts across groups of sibling tables
import logging

from .coercion import ValueType
from .tables import ColumnRole, key_column_name

logger = logging.getLogger(__name__)


class RowBalanceEngine:
    """
    Pads tables with empty rows so that, for every main record, all tables of
    a rule's group carry the same number of rows.

    Multi-column print layouts place sibling tables side by side; without
    equal row counts per record their bands drift out of line.
    """

    def __init__(self, id_store):
        self.id_store = id_store

    def balance(self, rules, tables, main_table):
        """
        Apply every rule to every main record, in place.

        Rules are applied in order and independently, so a table that belongs
        to several rules is padded by each of them in turn.

        Args:
            rules: List of RowBalanceRule (tables + optional min_rows_per_table)
            tables: Dict of table name -> Table; padding rows are appended here
            main_table: The main Table; its rows define the parent ids

        Returns:
            int: Number of padding rows added
        """
        if not rules:
            return 0

        main_key = key_column_name(main_table.name)
        groups = [self._resolve_group(rule, tables, main_table) for rule in rules]

        # Row counts per parent id, kept current as padding is added
        counts = {}
        for group in groups:
            for table in group:
                if table.name not in counts:
                    counts[table.name] = table.count_by(main_key)

        added = 0
        for main_row in main_table.rows:
            parent_id = main_row[main_table.get_column(main_key).name]
            for rule, group in zip(rules, groups):
                if group:
                    added += self._balance_parent(rule, group, parent_id, main_key, counts)

        if added:
            logger.info("Row balancing added %d padding rows", added)
        return added

    def _resolve_group(self, rule, tables, main_table):
        """Tables of a rule that exist in this report; unknown names are ignored."""
        group = []
        for name in rule.tables:
            if name == main_table.name:
                logger.debug("Balance rule names the main table '%s'; ignoring it", name)
                continue
            table = tables.get(name)
            if table is None:
                logger.debug("Balance rule names unknown table '%s'", name)
                continue
            if table not in group:
                group.append(table)
        return group

    def _balance_parent(self, rule, group, parent_id, main_key, counts):
        minimums = rule.min_rows_per_table or {}

        target = max(counts[table.name].get(parent_id, 0) for table in group)
        for table in group:
            target = max(target, minimums.get(table.name, 0))

        added = 0
        for table in group:
            current = counts[table.name].get(parent_id, 0)
            missing = target - current
            if missing <= 0:
                continue

            logger.debug("Padding %s with %d rows for %s=%s", table.name, missing, main_key, parent_id)
            for _ in range(missing):
                self._append_padding_row(table, main_key, parent_id)
            counts[table.name][parent_id] = target
            added += missing

        return added

    def _append_padding_row(self, table, main_key, parent_id):
        # Tables that never saw the main key (e.g. placeholders) gain it here
        if not table.has_column(main_key) or not table.has_column(table.primary_key):
            table.ensure_column(main_key, ValueType.INT, ColumnRole.FOREIGN_KEY)
            table.ensure_column(table.primary_key, ValueType.INT, ColumnRole.PRIMARY_KEY)

        table.append_padding_row({
            main_key: parent_id,
            table.primary_key: self.id_store.next_id(table.name),
        })
