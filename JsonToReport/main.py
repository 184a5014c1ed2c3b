# Contains the main entry point
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config.settings import get_settings
from .core.exceptions import ReportError, TemplateNotFoundError
from .core.normalizer import JsonReportNormalizer
from .rendering.dataset import ReportDataSet

logger = logging.getLogger(__name__)


@dataclass
class ReportResult:
    """Outcome of one report request; failures carry a message instead of raising."""
    success: bool
    message: str
    dataset: Optional[ReportDataSet] = None
    output: Optional[bytes] = None


def process_json_to_report(json_data, report_name, config_store, renderer=None,
                           templates_folder=None, id_store=None):
    """
    Processes a JSON document into the tables of a report, and renders it if asked.

    Args:
        json_data: The JSON document (string, dict or list)
        report_name: Name of the report configuration to use
        config_store: ReportConfigStore with the loaded report configurations
        renderer: Optional ReportRenderer; without one only the tables are built
        templates_folder: Folder the configured template file lives in
            (defaults to the templates folder from the settings)
        id_store: IdCounterStore for the synthetic ids (process-wide by default)

    Returns:
        ReportResult: success flag, message, the registered tables and,
            when a renderer was given, the rendered document
    """
    try:
        config = config_store.require(report_name)

        # Transform the JSON into report tables
        tables, main_name = JsonReportNormalizer.normalize_json_to_tables(json_data, config, id_store)
        dataset = ReportDataSet.from_tables(tables, main_name)

        if renderer is None:
            return ReportResult(True, f"Built {len(dataset)} tables for report '{report_name}'", dataset)

        template_path = _template_path(config, templates_folder)
        output = renderer.render(template_path, dataset)
        return ReportResult(True, f"Report '{report_name}' generated", dataset, output)

    except (ReportError, ValueError) as e:
        logger.warning("Report '%s' failed: %s", report_name, e)
        return ReportResult(False, str(e))


def _template_path(config, templates_folder=None):
    if templates_folder is None:
        templates_folder = get_settings().templates_folder

    template_path = Path(templates_folder) / config.template_file
    if not config.template_file or not template_path.is_file():
        raise TemplateNotFoundError(template_path)
    return template_path
