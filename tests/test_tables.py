"""
Unit tests for the table model and the id counter store.
"""

import threading

from JsonToReport.core.coercion import ValueType
from JsonToReport.core.tables import ColumnRole, IdCounterStore, Table


class TestTable:
    """Tests for Table."""

    def test_columns_are_case_insensitive(self):
        """Test that the first spelling of a column is kept."""
        table = Table("Lines")
        table.ensure_column("name")
        table.ensure_column("Name")
        assert table.column_names == ["name"]
        assert table.get_column("NAME").name == "name"

    def test_new_column_back_fills_existing_rows(self):
        """Test that every row has a value for a column added later."""
        table = Table("Lines")
        table.ensure_column("a")
        table.append_row({"a": "1"})
        table.ensure_column("b")
        table.ensure_column("n", ValueType.INT)
        assert table.rows == [{"a": "1", "b": "", "n": None}]

    def test_append_row_fills_missing_columns(self):
        """Test default values for columns a row doesn't mention."""
        table = Table("Lines")
        table.ensure_column("a")
        table.ensure_column("LinesId", ValueType.INT, ColumnRole.PRIMARY_KEY)
        row = table.append_row({"LINESID": 4})
        assert row == {"a": "", "LinesId": 4}

    def test_rename_column_keeps_position_and_values(self):
        """Test renaming a column in place."""
        table = Table("Items")
        table.ensure_column("Name")
        table.ensure_column("Id")
        table.ensure_column("Total")
        table.append_row({"Name": "a", "Id": "9", "Total": "3"})
        table.rename_column("id", "ItemsId")
        assert table.column_names == ["Name", "ItemsId", "Total"]
        assert table.rows[0]["ItemsId"] == "9"
        assert not table.has_column("Id")

    def test_key_claims_same_named_data_column(self):
        """Test that a synthetic key takes over a data column of the same name."""
        table = Table("Lines")
        table.ensure_column("LinesId")
        table.append_row({"LinesId": "7"})
        column = table.ensure_column("LinesId", ValueType.INT, ColumnRole.PRIMARY_KEY)
        assert column.role is ColumnRole.PRIMARY_KEY
        assert table.rows[0]["LinesId"] == 7

    def test_padding_row(self):
        """Test that padding rows zero the data columns and null unknown keys."""
        table = Table("Lines")
        table.ensure_column("Text")
        table.ensure_column("Qty", ValueType.INT)
        table.ensure_column("ItemsId", ValueType.INT, ColumnRole.FOREIGN_KEY)
        table.ensure_column("LinesId", ValueType.INT, ColumnRole.PRIMARY_KEY)
        table.ensure_column("OrdersId", ValueType.INT, ColumnRole.FOREIGN_KEY)
        row = table.append_padding_row({"ItemsId": 2, "LinesId": 5})
        assert row == {"Text": "", "Qty": 0, "ItemsId": 2, "LinesId": 5, "OrdersId": None}

    def test_count_by(self):
        """Test counting rows per key value."""
        table = Table("Lines")
        table.ensure_column("ItemsId", ValueType.INT, ColumnRole.FOREIGN_KEY)
        for parent in (1, 1, 2):
            table.append_row({"ItemsId": parent})
        assert table.count_by("ItemsId") == {1: 2, 2: 1}
        assert table.count_by("Missing") == {}

    def test_to_frame(self):
        """Test DataFrame export keeps column order and uses nullable ints for keys."""
        table = Table("Lines")
        table.ensure_column("Text")
        table.ensure_column("LinesId", ValueType.INT, ColumnRole.PRIMARY_KEY)
        table.ensure_column("OrdersId", ValueType.INT, ColumnRole.FOREIGN_KEY)
        table.append_row({"Text": "a", "LinesId": 1, "OrdersId": 3})
        table.append_padding_row({"LinesId": 2})

        frame = table.to_frame()
        assert list(frame.columns) == ["Text", "LinesId", "OrdersId"]
        assert str(frame["LinesId"].dtype) == "Int64"
        assert frame["LinesId"].tolist() == [1, 2]
        assert frame["OrdersId"].isna().tolist() == [False, True]
        assert frame["Text"].tolist() == ["a", ""]

    def test_empty_table_to_frame(self):
        """Test that an empty table still exports its columns."""
        table = Table("Empty")
        table.ensure_column("Value")
        frame = table.to_frame()
        assert list(frame.columns) == ["Value"]
        assert len(frame) == 0


class TestIdCounterStore:
    """Tests for IdCounterStore."""

    def test_ids_are_sequential_per_table(self):
        """Test that each table name has its own counter."""
        store = IdCounterStore()
        assert [store.next_id("A") for _ in range(3)] == [1, 2, 3]
        assert store.next_id("B") == 1
        assert store.peek("A") == 4

    def test_reset(self):
        """Test that reset starts every counter over."""
        store = IdCounterStore()
        store.next_id("A")
        store.reset()
        assert store.next_id("A") == 1

    def test_concurrent_requests_never_share_an_id(self):
        """Test that threads drawing ids for the same table get unique ids."""
        store = IdCounterStore()
        issued = []
        lock = threading.Lock()

        def draw():
            ids = [store.next_id("Lines") for _ in range(500)]
            with lock:
                issued.extend(ids)

        threads = [threading.Thread(target=draw) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(issued) == list(range(1, 4001))
