# Contains the hand-off of report tables to the rendering engine
import logging
from typing import Dict, Protocol

import pandas as pd

logger = logging.getLogger(__name__)


class ReportRenderer(Protocol):
    """
    The reporting engine that turns a template and a data set into a document.

    Implementations load the template, bind its data bands to the registered
    tables by name and return the exported bytes (normally a PDF).
    """

    def render(self, template_path, dataset) -> bytes:
        ...


class ReportDataSet:
    """
    The tables of one report request, registered by name.

    Templates bind to table and column names without any checking, so names
    are kept exactly as the normalizer produced them.
    """

    def __init__(self, main_table_name=None):
        self.main_table_name = main_table_name
        self.tables = {}  # Table name -> Table, in registration order

    def __contains__(self, name):
        return name in self.tables

    def __len__(self):
        return len(self.tables)

    def __getitem__(self, name):
        return self.tables[name]

    def register(self, table, name=None):
        """
        Register a table, replacing any table already registered under the name.

        Args:
            table: Table to register
            name: Registration name (defaults to the table's own name)
        """
        name = name or table.name
        if name in self.tables:
            logger.debug("Replacing table '%s' in data set", name)
        self.tables[name] = table

    @classmethod
    def from_tables(cls, tables, main_table_name=None):
        """Build a data set from the dict returned by the normalizer."""
        dataset = cls(main_table_name)
        for name, table in tables.items():
            dataset.register(table, name)
        return dataset

    @property
    def main_table(self):
        if self.main_table_name is None:
            return None
        return self.tables.get(self.main_table_name)

    def frames(self) -> Dict[str, pd.DataFrame]:
        """
        Every table as a pandas DataFrame, keyed by registration name.

        Returns:
            dict: Table name -> DataFrame with the table's column order
        """
        return {name: table.to_frame() for name, table in self.tables.items()}

    def summary(self):
        """List of (table name, row count) pairs, for logging and diagnostics."""
        return [(name, len(table)) for name, table in self.tables.items()]
