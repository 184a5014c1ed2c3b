from .core.normalizer import JsonReportNormalizer
from .core.path_resolver import PathResolver
from .core.data_source import DataSourceResolver
from .core.materializer import RelationalMaterializer
from .core.balancer import RowBalanceEngine
from .core.tables import IdCounterStore, Table
from .config.report_config import ReportConfig, ReportConfigStore, RowBalanceRule
from .rendering.dataset import ReportDataSet, ReportRenderer

from .main import ReportResult, process_json_to_report

__all__ = [
    "process_json_to_report",
    "ReportResult",
    "JsonReportNormalizer",
    "PathResolver",
    "DataSourceResolver",
    "RelationalMaterializer",
    "RowBalanceEngine",
    "IdCounterStore",
    "Table",
    "ReportConfig",
    "ReportConfigStore",
    "RowBalanceRule",
    "ReportDataSet",
    "ReportRenderer",
]
