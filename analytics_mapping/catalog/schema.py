"""Dataset metadata classes."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Column:
    """Column metadata as reported by the backend."""

    name: str
    data_type: str

    def __repr__(self) -> str:
        return f"Column({self.name}, {self.data_type})"


@dataclass
class Dataset:
    """Dataset (table) metadata."""

    name: str
    columns: List[Column] = field(default_factory=list)

    def get_column(self, name: str) -> Optional[Column]:
        """Get column by name."""
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def column_names(self) -> List[str]:
        return [col.name for col in self.columns]

    def __repr__(self) -> str:
        return f"Dataset({self.name}, cols={len(self.columns)})"
