# Contains main normalization logic
import json
import logging

from .balancer import RowBalanceEngine
from .data_source import DataSourceResolver
from .exceptions import InvalidDocumentError
from .materializer import RelationalMaterializer, placeholder_table
from .nodes import is_container
from .path_resolver import NOT_FOUND
from .tables import default_id_store

logger = logging.getLogger(__name__)


class JsonReportNormalizer:
    """
    Turns a JSON document into the named tables a report template binds to.
    """

    @staticmethod
    def parse_document(json_data):
        """
        Accept a JSON string or an already parsed document.

        Raises:
            ValueError: If a string is not valid JSON
            InvalidDocumentError: If the root is neither an object nor an array
        """
        # Parse JSON if it's a string
        if isinstance(json_data, (str, bytes)):
            try:
                json_data = json.loads(json_data)
            except json.JSONDecodeError:
                raise ValueError("Invalid JSON string provided")
            except RecursionError:
                raise ValueError("JSON string is nested too deeply to parse")

        if not is_container(json_data):
            raise InvalidDocumentError("The JSON document must be an object or an array")
        return json_data

    @classmethod
    def normalize_json_to_tables(cls, json_data, config, id_store=None):
        """
        Convert a JSON document into report tables following a report configuration.

        Args:
            json_data: The JSON document (string, dict or list)
            config: ReportConfig of the report being generated
            id_store: IdCounterStore for the synthetic ids (the process-wide
                store by default)

        Returns:
            tuple: (tables, main_table_name) where:
                - tables: Dict of table name -> Table, main table first
                - main_table_name: Name of the table holding the main records
        """
        id_store = id_store or default_id_store
        document = cls.parse_document(json_data)

        # Locate the records that drive the report
        main_name, main_node = DataSourceResolver.locate(config, document)
        if main_node is NOT_FOUND:
            # The report still gets a table to bind to, just an empty one
            tables = {main_name: placeholder_table(main_name)}
            cls._add_required_placeholders(tables, config)
            return tables, main_name

        # Build the main table and everything nested below it
        materializer = RelationalMaterializer(id_store)
        main_table, child_tables = materializer.materialize(main_node, main_name)
        if materializer.coercion_failures:
            logger.warning("%d cells could not be coerced and were left empty",
                           materializer.coercion_failures)

        tables = {main_name: main_table}
        tables.update(child_tables)
        cls._add_required_placeholders(tables, config)

        # Line up sibling tables for multi-column layouts
        if config.row_balance_rules:
            RowBalanceEngine(id_store).balance(config.row_balance_rules, tables, main_table)

        for name, table in tables.items():
            logger.info("Table: %s, Rows: %d", name, len(table))

        return tables, main_name

    @staticmethod
    def _add_required_placeholders(tables, config):
        """Register an empty table for every required source the document lacks."""
        for name in config.required_data_sources or []:
            if name not in tables:
                logger.warning("Required data source '%s' was not found in the document", name)
                tables[name] = placeholder_table(name)
