# Contains class for picking the main record set of a report
import logging

from .nodes import NodeKind, is_container, kind_of
from .path_resolver import NOT_FOUND, PathResolver

logger = logging.getLogger(__name__)

DEFAULT_MAIN_TABLE_NAME = "DATA"


class DataSourceResolver:
    """
    Decides which part of the document drives the report's repeating rows.
    """

    @staticmethod
    def resolve(config):
        """
        Pick the main data source name and its path from a report configuration.

        The first mapping whose path is empty wins. Without one, the first
        required data source is used, at its mapped path or, failing that, at
        a path equal to its own name.

        Args:
            config: ReportConfig (anything with data_source_mappings and
                required_data_sources)

        Returns:
            tuple: (main_table_name, main_path)
        """
        mappings = config.data_source_mappings or {}
        for name, path in mappings.items():
            if not (path or "").strip():
                return name, ""

        required = config.required_data_sources or []
        if required:
            name = required[0]
            return name, mappings.get(name) or name

        return DEFAULT_MAIN_TABLE_NAME, ""

    @classmethod
    def locate(cls, config, root):
        """
        Resolve the main data source and fetch its node from the document.

        An empty path first looks for a property named like the main table
        (so {"Items": [...]} with main source "Items" yields the array), then
        falls back to the root itself.

        Returns:
            tuple: (main_table_name, node or NOT_FOUND)
        """
        name, path = cls.resolve(config)

        if path:
            node = PathResolver.resolve(root, path)
        elif kind_of(root) is NodeKind.OBJECT and is_container(root.get(name)):
            node = root[name]
        else:
            node = root

        if node is NOT_FOUND:
            logger.warning("Main data source '%s' not found at path '%s'", name, path)
        elif not is_container(node):
            logger.warning("Main data source '%s' at path '%s' is a scalar", name, path)
            node = NOT_FOUND

        return name, node
