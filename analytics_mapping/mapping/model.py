"""Column mapping data model."""

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Iterator, List, Optional

from ..catalog.columns import ColumnType


@dataclass(frozen=True)
class ColumnMapping:
    """A user's naming of one raw dataset column."""

    source_column: str
    friendly_name: str
    column_type: ColumnType
    description: Optional[str] = None

    def renamed(self, friendly_name: str, description: Optional[str]) -> "ColumnMapping":
        """Copy with a new name and description; type is kept."""
        return replace(self, friendly_name=friendly_name, description=description)

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "source_column": self.source_column,
            "friendly_name": self.friendly_name,
            "column_type": self.column_type.value,
        }
        if self.description is not None:
            record["description"] = self.description
        return record


class MappingCollection:
    """Immutable, insertion-ordered set of mappings keyed by source column.

    Operations that change the collection return a new instance. Entries that
    an operation does not touch keep their relative order.
    """

    __slots__ = ("_entries",)

    def __init__(self, mappings: Iterable[ColumnMapping] = ()):
        entries: Dict[str, ColumnMapping] = {}
        for mapping in mappings:
            if mapping.source_column in entries:
                raise ValueError(f"Duplicate mapping for column {mapping.source_column}")
            entries[mapping.source_column] = mapping
        self._entries = entries

    @classmethod
    def _from_dict(cls, entries: Dict[str, ColumnMapping]) -> "MappingCollection":
        collection = cls.__new__(cls)
        collection._entries = entries
        return collection

    def get(self, column: str) -> Optional[ColumnMapping]:
        return self._entries.get(column)

    def with_mapping(self, mapping: ColumnMapping) -> "MappingCollection":
        """Replace the entry for mapping.source_column in place, or append it."""
        entries = dict(self._entries)
        entries[mapping.source_column] = mapping
        return self._from_dict(entries)

    def without(self, column: str) -> "MappingCollection":
        """Drop the entry for column; returns self when absent."""
        if column not in self._entries:
            return self
        entries = dict(self._entries)
        del entries[column]
        return self._from_dict(entries)

    def to_list(self) -> List[ColumnMapping]:
        return list(self._entries.values())

    def columns(self) -> List[str]:
        return list(self._entries.keys())

    def to_records(self) -> List[Dict[str, Any]]:
        """Plain dicts for callers that persist mappings."""
        return [mapping.to_record() for mapping in self._entries.values()]

    def __iter__(self) -> Iterator[ColumnMapping]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, column: object) -> bool:
        return column in self._entries

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MappingCollection):
            return NotImplemented
        return self.to_list() == other.to_list()

    def __hash__(self) -> int:
        return hash(tuple(self._entries.values()))

    def __repr__(self) -> str:
        return f"MappingCollection({self.to_list()!r})"
