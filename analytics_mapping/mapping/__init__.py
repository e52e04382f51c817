"""Column mappings: model, edit operations and bulk paste."""

from .editor import MappingEditor
from .model import ColumnMapping, MappingCollection
from .paste import PasteDistributor, PasteEvent
from .store import MappingStore, from_records, get, remove, set_mapping

__all__ = [
    "ColumnMapping",
    "MappingCollection",
    "MappingEditor",
    "MappingStore",
    "PasteDistributor",
    "PasteEvent",
    "from_records",
    "get",
    "remove",
    "set_mapping",
]
