"""Bulk paste of comma-separated friendly names across a column category."""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from ..catalog.columns import ColumnSchema
from .model import ColumnMapping, MappingCollection

logger = logging.getLogger(__name__)

# A previously logged paste, e.g. `text: "a, b, c"`, copied back by the user
_LOGGED_PASTE_PATTERN = re.compile(r'text:\s*"(.*?)"', re.DOTALL)


@dataclass
class PasteEvent:
    """Clipboard payload of a paste into a friendly-name field.

    ``text`` is what the paste event carried. When it is empty,
    ``read_clipboard`` is tried as a fallback; it may raise (permission
    denied, no clipboard available), which counts as no text.
    """

    text: Optional[str] = None
    read_clipboard: Optional[Callable[[], Optional[str]]] = None

    def read_text(self) -> str:
        text = self.text or ""
        if text or self.read_clipboard is None:
            return text
        try:
            return self.read_clipboard() or ""
        except Exception as exc:
            logger.debug(f"Clipboard read failed, treating paste as empty: {exc}")
            return ""


class PasteDistributor:
    """Spreads pasted CSV-like values over consecutive columns of a category.

    The whole paste becomes one collection transition: the caller passes the
    collection it currently holds and commits the returned one.
    """

    def __init__(self, schema: ColumnSchema, preserve_empty_fields: bool = True):
        """Initialize distributor.

        Args:
            schema: Column layout used to type the new mappings
            preserve_empty_fields: When True, ``a,,b`` leaves the middle column
                unmapped and puts ``b`` in the third column. When False empty
                fields are dropped and later values shift left.
        """
        self.schema = schema
        self.preserve_empty_fields = preserve_empty_fields

    def extract_values(self, text: str) -> Optional[List[str]]:
        """Split pasted text into values.

        Returns:
            None when the text is not CSV-like (no comma), otherwise the
            trimmed values. Empty values appear as "" only when
            preserve_empty_fields is set.
        """
        if not text or "," not in text:
            return None

        match = _LOGGED_PASTE_PATTERN.search(text)
        if match and match.group(1):
            text = match.group(1)

        values = [piece.strip() for piece in text.split(",")]
        if not self.preserve_empty_fields:
            values = [value for value in values if value]
        return values

    def distribute(
        self,
        collection: MappingCollection,
        text: str,
        start_column: str,
        columns: Sequence[str],
    ) -> Optional[MappingCollection]:
        """Merge pasted values into the collection.

        Args:
            collection: Mappings as they are right now
            text: Pasted text
            start_column: Column whose field received the paste
            columns: Ordered columns of the category containing start_column

        Returns:
            The merged collection, or None when the paste is not handled and
            the plain single-value paste should go ahead.
        """
        values = self.extract_values(text)
        if values is None or not any(values):
            return None

        columns = list(columns)
        if start_column not in columns:
            logger.debug(f"Paste target '{start_column}' is not in its category")
            return None
        start_index = columns.index(start_column)

        assigned: Dict[str, ColumnMapping] = {}
        for offset, value in enumerate(values):
            target_index = start_index + offset
            if target_index >= len(columns):
                logger.debug(f"Dropping {len(values) - offset} pasted values past '{columns[-1]}'")
                break
            if not value:
                continue
            column = columns[target_index]
            column_type = self.schema.lookup_type(column)
            if column_type is None:
                continue
            assigned[column] = ColumnMapping(
                source_column=column,
                friendly_name=value,
                column_type=column_type,
            )

        if not assigned:
            return None

        section = set(columns)
        merged = [mapping for mapping in collection if mapping.source_column not in section]
        for column in columns:
            if column in assigned:
                merged.append(assigned[column])
        logger.info(f"Pasted {len(assigned)} names starting at '{start_column}'")
        return MappingCollection(merged)

    def handle(
        self,
        collection: MappingCollection,
        event: PasteEvent,
        start_column: str,
        columns: Sequence[str],
    ) -> Optional[MappingCollection]:
        """Read the paste event and distribute it. Never raises.

        Returns:
            The merged collection, or None to leave the collection unchanged.
        """
        try:
            text = event.read_text()
            return self.distribute(collection, text, start_column, columns)
        except Exception as exc:
            logger.debug(f"Paste handling aborted: {exc}")
            return None
