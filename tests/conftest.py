"""Shared fixtures for the analytics mapping tests."""

from __future__ import annotations

from typing import Dict, List, Optional

import pyarrow as pa
import pytest

from analytics_mapping.catalog import ColumnSchema
from analytics_mapping.config import SchemaConfig
from analytics_mapping.datasources.base import (
    ColumnMetadata,
    DataSource,
    QueryResult,
    TableMetadata,
)


class RecordingDataSource(DataSource):
    """In-memory data source that records every query it receives."""

    def __init__(
        self,
        table: Optional[pa.Table] = None,
        datasets: Optional[Dict[str, List[ColumnMetadata]]] = None,
    ):
        super().__init__("recording", {})
        if table is None:
            table = pa.table({"blob1": ["a", "b"], "double1": [1.0, 2.0]})
        self.table = table
        self.datasets = datasets or {}
        self.queries: List[str] = []
        self.metadata_requests: List[str] = []

    def connect(self) -> None:
        self._connected = True

    def disconnect(self) -> None:
        self._connected = False

    def list_tables(self) -> List[str]:
        return list(self.datasets.keys())

    def get_table_metadata(self, table: str) -> TableMetadata:
        self.metadata_requests.append(table)
        return TableMetadata(table_name=table, columns=self.datasets[table])

    def execute_query(self, query: str) -> QueryResult:
        self.queries.append(query)
        return QueryResult(
            table=self.table, row_count=self.table.num_rows, total_rows=self.table.num_rows
        )


@pytest.fixture
def small_schema() -> ColumnSchema:
    """Three blobs, two doubles, one index."""
    return ColumnSchema(SchemaConfig(blob_columns=3, double_columns=2, index_columns=1))


@pytest.fixture
def default_schema() -> ColumnSchema:
    return ColumnSchema()


@pytest.fixture
def recording_datasource() -> RecordingDataSource:
    return RecordingDataSource(
        datasets={
            "web_events": [
                ColumnMetadata(name="timestamp", data_type="DateTime"),
                ColumnMetadata(name="blob1", data_type="String"),
                ColumnMetadata(name="double1", data_type="Float64"),
            ],
            "api_calls": [ColumnMetadata(name="index1", data_type="String")],
        }
    )
