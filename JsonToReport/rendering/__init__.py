from .dataset import ReportDataSet, ReportRenderer

__all__ = [
    'ReportDataSet',
    'ReportRenderer',
]
