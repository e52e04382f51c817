"""Raw column layout of an Analytics Engine dataset."""

from enum import Enum
from typing import Dict, Optional, Tuple, Union

from ..config import SchemaConfig


class ColumnType(Enum):
    """Category of a raw dataset column."""

    BLOB = "blob"
    DOUBLE = "double"
    INDEX = "index"


CATEGORY_LABELS = {
    ColumnType.BLOB: "Blob Columns (Text)",
    ColumnType.DOUBLE: "Double Columns (Numbers)",
    ColumnType.INDEX: "Index Columns",
}


class ColumnSchema:
    """Lookup of raw column names and their categories.

    Columns are named ``<category><n>`` with ``n`` counting from 1, e.g.
    ``blob1..blob20``. The per-category order is the numeric order.
    """

    def __init__(self, config: Optional[SchemaConfig] = None):
        if config is None:
            config = SchemaConfig()
        counts = {
            ColumnType.BLOB: config.blob_columns,
            ColumnType.DOUBLE: config.double_columns,
            ColumnType.INDEX: config.index_columns,
        }
        self._columns: Dict[ColumnType, Tuple[str, ...]] = {}
        self._types: Dict[str, ColumnType] = {}
        for column_type, count in counts.items():
            names = tuple(f"{column_type.value}{n}" for n in range(1, count + 1))
            self._columns[column_type] = names
            for name in names:
                self._types[name] = column_type

    def lookup_type(self, column: str) -> Optional[ColumnType]:
        """Return the category of a column, or None if it does not exist."""
        return self._types.get(column)

    def columns_by_category(
        self, category: Union[ColumnType, str]
    ) -> Tuple[str, ...]:
        """Return the ordered column names of a category."""
        return self._columns[ColumnType(category)]

    def categories(self) -> Tuple[ColumnType, ...]:
        return tuple(self._columns.keys())

    def __contains__(self, column: str) -> bool:
        return column in self._types

    def __repr__(self) -> str:
        sizes = ", ".join(
            f"{column_type.value}={len(names)}"
            for column_type, names in self._columns.items()
        )
        return f"ColumnSchema({sizes})"
