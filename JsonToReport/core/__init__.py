from .normalizer import JsonReportNormalizer
from .path_resolver import NOT_FOUND, PathResolver
from .data_source import DataSourceResolver
from .coercion import CoercionResult, ValueType, coerce_value
from .tables import Column, ColumnRole, IdCounterStore, Table, default_id_store
from .materializer import RelationalMaterializer
from .balancer import RowBalanceEngine

__all__ = [
    'JsonReportNormalizer',
    'NOT_FOUND',
    'PathResolver',
    'DataSourceResolver',
    'CoercionResult',
    'ValueType',
    'coerce_value',
    'Column',
    'ColumnRole',
    'IdCounterStore',
    'Table',
    'default_id_store',
    'RelationalMaterializer',
    'RowBalanceEngine',
]
