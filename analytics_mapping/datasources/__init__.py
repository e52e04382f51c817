"""Data source connectors."""

from .base import DataSource, ColumnMetadata, TableMetadata, QueryResult
from .analytics_engine import AnalyticsEngineDataSource, AnalyticsEngineError

__all__ = [
    "DataSource",
    "ColumnMetadata",
    "TableMetadata",
    "QueryResult",
    "AnalyticsEngineDataSource",
    "AnalyticsEngineError",
]
