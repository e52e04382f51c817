"""Stateful editor over a mapping collection."""

import logging
from typing import Callable, Optional, Union

from ..catalog.columns import ColumnSchema, ColumnType
from . import store
from .model import ColumnMapping, MappingCollection
from .paste import PasteDistributor, PasteEvent

logger = logging.getLogger(__name__)


class MappingEditor:
    """Holds the current collection and commits every change through on_change.

    Each edit reads ``self.mappings`` once and calls ``on_change`` once with
    the new collection, so a bulk paste is a single commit.
    """

    def __init__(
        self,
        schema: ColumnSchema,
        mappings: Optional[MappingCollection] = None,
        on_change: Optional[Callable[[MappingCollection], None]] = None,
        preserve_empty_fields: bool = True,
    ):
        self.schema = schema
        if mappings is None:
            mappings = MappingCollection()
        self.mappings = mappings
        self.on_change = on_change
        self.distributor = PasteDistributor(schema, preserve_empty_fields)

    def mapping_for(self, column: str) -> Optional[ColumnMapping]:
        return store.get(self.mappings, column)

    def change(
        self, column: str, friendly_name: str, description: Optional[str] = None
    ) -> None:
        """Apply a typed friendly name; blank removes the mapping."""
        updated = store.set_mapping(
            self.mappings, self.schema, column, friendly_name, description
        )
        if updated is not self.mappings:
            self._commit(updated)

    def remove(self, column: str) -> None:
        updated = store.remove(self.mappings, column)
        if updated is not self.mappings:
            self._commit(updated)

    def paste(
        self,
        event: PasteEvent,
        start_column: str,
        category: Union[ColumnType, str, None] = None,
    ) -> bool:
        """Handle a paste into start_column's field.

        Args:
            event: Clipboard payload
            start_column: Column that received the paste
            category: Category of the column; looked up when omitted

        Returns:
            True when the paste was distributed and the native paste should be
            suppressed, False otherwise.
        """
        if category is None:
            category = self.schema.lookup_type(start_column)
            if category is None:
                return False
        try:
            columns = self.schema.columns_by_category(category)
        except ValueError:
            logger.debug(f"Ignoring paste for unknown category '{category}'")
            return False
        snapshot = self.mappings
        updated = self.distributor.handle(snapshot, event, start_column, columns)
        if updated is None:
            return False
        self._commit(updated)
        return True

    def mapped_count(self, category: Union[ColumnType, str]) -> int:
        """Number of mapped columns in a category."""
        columns = self.schema.columns_by_category(category)
        return sum(1 for column in columns if column in self.mappings)

    def _commit(self, updated: MappingCollection) -> None:
        self.mappings = updated
        if self.on_change is not None:
            self.on_change(updated)
