"""QueryExecutor runs processors around a data source query."""

from __future__ import annotations

from typing import List, Mapping, Optional, Protocol

from ..datasources.base import DataSource, QueryResult
from ..utils.logging import get_query_logger
from .query_context import QueryContext
from .templater import ParameterValue


class QueryProcessor(Protocol):
    """Processor interface for both pre and post execution phases."""

    def before_execution(self, executor: "QueryExecutor") -> None:
        """Run before execution to rewrite the query."""
        ...

    def after_execution(
        self, executor: "QueryExecutor", result: QueryResult
    ) -> QueryResult:
        """Run after execution to transform the result."""
        ...


class QueryExecutor:
    """Coordinates processors with the data source."""

    def __init__(
        self,
        datasource: DataSource,
        processors: Optional[List[QueryProcessor]] = None,
    ):
        """Initialize dependencies."""
        self.datasource = datasource
        if processors is None:
            processors = []
        self.processors = processors
        self.query_context = QueryContext("")

    def execute(
        self, sql: str, params: Optional[Mapping[str, ParameterValue]] = None
    ) -> QueryResult:
        """Run the query with processor hooks."""
        self.query_context = QueryContext(sql, params)
        logger = get_query_logger(__name__, {"query_id": self.query_context.query_id})
        final_sql = self._run_before_processors()
        logger.debug(f"Final query text: {final_sql}")
        result = self.datasource.execute_query(final_sql)
        logger.info(f"Query returned {result.row_count} rows")
        return self._run_after_processors(result)

    def _run_before_processors(self) -> str:
        """Execute processor hooks before the query is sent."""
        for processor in self.processors:
            processor.before_execution(self)
        return self.query_context.rewritten_sql

    def _run_after_processors(self, result: QueryResult) -> QueryResult:
        """Execute processor hooks after execution."""
        for processor in reversed(self.processors):
            result = processor.after_execution(self, result)
        return result
