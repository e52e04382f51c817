"""Query context objects shared across processors and execution."""

import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .templater import ParameterValue


@dataclass
class ResultColumn:
    """Represents a single output column's naming data."""

    source_name: str
    visible_name: str


class QueryContext:
    """Tracks metadata every processor can read or update."""

    def __init__(
        self,
        original_sql: str,
        params: Optional[Mapping[str, ParameterValue]] = None,
    ):
        """Initialize context with the user's query text and parameters."""
        self.query_id = uuid.uuid4().hex[:12]
        self.original_sql = original_sql
        self.rewritten_sql = original_sql
        self.params: Dict[str, ParameterValue] = dict(params or {})
        self.metadata: Dict[str, Any] = {}
        self.columns: List[ResultColumn] = []

    def add_column(self, column: ResultColumn) -> None:
        """Record an output column in result order."""
        self.columns.append(column)

    def set_metadata(self, key: str, value: Any) -> None:
        """Store arbitrary processor metadata."""
        self.metadata[key] = value

    def get_metadata(self, key: str) -> Any:
        """Read metadata produced by earlier processors."""
        return self.metadata.get(key)
