"""Catalog caching dataset metadata from the analytics backend."""

import logging
from typing import Dict, List, Optional

from ..datasources.base import DataSource
from .schema import Column, Dataset

logger = logging.getLogger(__name__)


class Catalog:
    """Caches the dataset list and per-dataset columns of one data source."""

    def __init__(self, datasource: Optional[DataSource] = None):
        """Initialize catalog."""
        self.datasource = datasource
        self.datasets: Dict[str, Dataset] = {}
        self._dataset_names: Optional[List[str]] = None

    def register_datasource(self, datasource: DataSource) -> None:
        """Register the data source and drop anything cached from a previous one.

        Args:
            datasource: Data source to register
        """
        self.datasource = datasource
        self.invalidate()

    def invalidate(self) -> None:
        """Forget cached metadata."""
        self.datasets = {}
        self._dataset_names = None

    def list_datasets(self, refresh: bool = False) -> List[str]:
        """List dataset names, querying the backend on first use.

        Args:
            refresh: Query the backend even if a list is cached

        Returns:
            Dataset names in backend order
        """
        if self._dataset_names is None or refresh:
            datasource = self._require_datasource()
            self._dataset_names = datasource.list_tables()
            logger.info(f"Loaded {len(self._dataset_names)} datasets from {datasource.name}")
        return list(self._dataset_names)

    def get_dataset(self, name: str, refresh: bool = False) -> Dataset:
        """Get dataset metadata, loading its columns from the backend when needed.

        Args:
            name: Dataset name
            refresh: Reload columns even if cached

        Returns:
            Dataset with column metadata
        """
        if name in self.datasets and not refresh:
            return self.datasets[name]

        datasource = self._require_datasource()
        metadata = datasource.get_table_metadata(name)
        columns = []
        for col_meta in metadata.columns:
            columns.append(Column(name=col_meta.name, data_type=col_meta.data_type))
        dataset = Dataset(name=name, columns=columns)
        self.datasets[name] = dataset
        return dataset

    def _require_datasource(self) -> DataSource:
        if self.datasource is None:
            raise RuntimeError("No data source registered with the catalog")
        return self.datasource

    def __repr__(self) -> str:
        return f"Catalog(datasets={len(self.datasets)})"
