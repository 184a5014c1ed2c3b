from .report_config import ReportConfig, ReportConfigStore, RowBalanceRule
from .settings import ReportSettings, get_settings

__all__ = [
    "ReportConfig",
    "ReportConfigStore",
    "RowBalanceRule",
    "ReportSettings",
    "get_settings",
]
