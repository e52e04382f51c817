"""Catalog of datasets and the raw column layout."""

from .catalog import Catalog
from .columns import CATEGORY_LABELS, ColumnSchema, ColumnType
from .schema import Column, Dataset

__all__ = [
    "Catalog",
    "CATEGORY_LABELS",
    "Column",
    "ColumnSchema",
    "ColumnType",
    "Dataset",
]
