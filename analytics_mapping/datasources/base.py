"""Base data source interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Dict, Any

import pyarrow as pa


@dataclass
class ColumnMetadata:
    """Metadata about a column."""

    name: str
    data_type: str


@dataclass
class TableMetadata:
    """Metadata about a dataset."""

    table_name: str
    columns: List[ColumnMetadata]


@dataclass
class QueryResult:
    """Rows returned by a query plus the backend's row counters."""

    table: pa.Table
    row_count: int
    total_rows: int

    @property
    def column_names(self) -> List[str]:
        return self.table.column_names


class DataSource(ABC):
    """Abstract base class for data sources."""

    def __init__(self, name: str, config: Dict[str, Any]):
        """Initialize data source.

        Args:
            name: Unique name for this data source
            config: Configuration dictionary
        """
        self.name = name
        self.config = config
        self._connected = False

    @abstractmethod
    def connect(self) -> None:
        """Prepare the connection to the data source."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Release the connection to the data source."""
        pass

    @abstractmethod
    def list_tables(self) -> List[str]:
        """List all datasets.

        Returns:
            List of dataset names
        """
        pass

    @abstractmethod
    def get_table_metadata(self, table: str) -> TableMetadata:
        """Get metadata for a dataset.

        Args:
            table: Dataset name

        Returns:
            Table metadata including columns and types
        """
        pass

    @abstractmethod
    def execute_query(self, query: str) -> QueryResult:
        """Execute a query and return results as an Arrow table.

        Args:
            query: Final query text, sent as-is

        Returns:
            Query result
        """
        pass

    def is_connected(self) -> bool:
        """Check if data source is connected.

        Returns:
            True if connected, False otherwise
        """
        return self._connected

    def ensure_connected(self) -> None:
        """Ensure data source is connected."""
        if not self.is_connected():
            self.connect()
            self._connected = True

    def __enter__(self):
        """Context manager entry."""
        self.ensure_connected()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.disconnect()
        self._connected = False
        return False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name})"
