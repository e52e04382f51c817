"""Pure edit operations over a MappingCollection."""

import logging
from typing import Any, Dict, Iterable, Optional

from ..catalog.columns import ColumnSchema
from .model import ColumnMapping, MappingCollection

logger = logging.getLogger(__name__)


def get(collection: MappingCollection, column: str) -> Optional[ColumnMapping]:
    """Exact-key lookup."""
    return collection.get(column)


def set_mapping(
    collection: MappingCollection,
    schema: ColumnSchema,
    column: str,
    friendly_name: str,
    description: Optional[str] = None,
) -> MappingCollection:
    """Create, update or remove the mapping for one column.

    Args:
        collection: Current mappings
        schema: Column layout used to resolve the column type
        column: Raw column name
        friendly_name: New display name; blank removes the mapping
        description: Optional free text

    Returns:
        The resulting collection. Unknown columns leave it unchanged.
    """
    column_type = schema.lookup_type(column)
    if column_type is None:
        logger.debug(f"Ignoring mapping for unknown column '{column}'")
        return collection

    if friendly_name.strip() == "":
        return collection.without(column)

    existing = collection.get(column)
    if existing is not None:
        return collection.with_mapping(existing.renamed(friendly_name, description))

    return collection.with_mapping(
        ColumnMapping(
            source_column=column,
            friendly_name=friendly_name,
            column_type=column_type,
            description=description,
        )
    )


def remove(collection: MappingCollection, column: str) -> MappingCollection:
    """Drop the mapping for column if present."""
    return collection.without(column)


def _record_text(value: Any, column: str, key: str) -> Optional[str]:
    """Accept strings and plain numbers; YAML reads `2024` as an int."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise ValueError(
        f"Mapping for '{column}' has a {type(value).__name__} {key}; expected text"
    )


def from_records(
    records: Iterable[Dict[str, Any]], schema: ColumnSchema
) -> MappingCollection:
    """Rebuild a collection from stored records.

    Each record goes through set_mapping, so the column type always comes
    from the schema and blank names or unknown columns are skipped. A stored
    ``column_type`` is ignored.

    Raises:
        ValueError: If a record is not a mapping, has no source column, or
            holds a name or description that is not text
    """
    collection = MappingCollection()
    for record in records:
        if not isinstance(record, dict) or not isinstance(record.get("source_column"), str):
            raise ValueError(f"Invalid mapping record: {record!r}")
        column = record["source_column"]
        friendly_name = _record_text(record.get("friendly_name"), column, "friendly_name")
        description = _record_text(record.get("description"), column, "description")
        collection = set_mapping(collection, schema, column, friendly_name or "", description)
    return collection


class MappingStore:
    """Binds the pure operations to a column schema."""

    def __init__(self, schema: ColumnSchema):
        self.schema = schema

    def get(self, collection: MappingCollection, column: str) -> Optional[ColumnMapping]:
        return get(collection, column)

    def set(
        self,
        collection: MappingCollection,
        column: str,
        friendly_name: str,
        description: Optional[str] = None,
    ) -> MappingCollection:
        return set_mapping(collection, self.schema, column, friendly_name, description)

    def remove(self, collection: MappingCollection, column: str) -> MappingCollection:
        return remove(collection, column)
