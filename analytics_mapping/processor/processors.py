"""Built-in query processors."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Set

from ..datasources.base import QueryResult
from ..mapping.model import MappingCollection
from .query_context import ResultColumn
from .query_executor import QueryExecutor, QueryProcessor
from .templater import QueryTemplater, missing_parameters

logger = logging.getLogger(__name__)


class ParameterSubstitutionProcessor(QueryProcessor):
    """Replaces {{name}} placeholders with the context parameters."""

    def __init__(self, templater: Optional[QueryTemplater] = None):
        if templater is None:
            templater = QueryTemplater()
        self.templater = templater

    def before_execution(self, executor: QueryExecutor) -> None:
        """Substitute parameters into the rewritten SQL."""
        context = executor.query_context
        missing = missing_parameters(context.rewritten_sql, context.params)
        context.set_metadata("missing_parameters", missing)
        if missing:
            logger.warning(f"No value for placeholders: {', '.join(missing)}")
        context.rewritten_sql = self.templater.substitute(
            context.rewritten_sql, context.params
        )

    def after_execution(
        self, executor: QueryExecutor, result: QueryResult
    ) -> QueryResult:
        return result


class FriendlyNameProcessor(QueryProcessor):
    """Renames raw result columns to their mapped friendly names."""

    def __init__(self, mappings: Callable[[], MappingCollection]):
        """Initialize with a getter so the latest mappings are used per query."""
        self.mappings = mappings

    def before_execution(self, executor: QueryExecutor) -> None:
        return None

    def after_execution(
        self, executor: QueryExecutor, result: QueryResult
    ) -> QueryResult:
        """Rename mapped columns; unmapped ones keep the raw name."""
        collection = self.mappings()
        if len(collection) == 0:
            return result
        context = executor.query_context
        raw_names = result.column_names
        names = self._visible_names(raw_names, collection)
        for raw, visible in zip(raw_names, names):
            context.add_column(ResultColumn(source_name=raw, visible_name=visible))
        if names == raw_names:
            return result
        table = result.table.rename_columns(names)
        return QueryResult(table=table, row_count=result.row_count, total_rows=result.total_rows)

    def _visible_names(
        self, raw_names: List[str], collection: MappingCollection
    ) -> List[str]:
        taken: Set[str] = set(raw_names)
        names: List[str] = []
        for raw in raw_names:
            mapping = collection.get(raw)
            if mapping is None or mapping.friendly_name == raw:
                names.append(raw)
                continue
            if mapping.friendly_name in taken:
                logger.warning(
                    f"Keeping column '{raw}': name '{mapping.friendly_name}' is already used"
                )
                names.append(raw)
                continue
            taken.discard(raw)
            taken.add(mapping.friendly_name)
            names.append(mapping.friendly_name)
        return names
