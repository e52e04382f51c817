"""Query processing utilities (templating, processors and executor)."""

from .query_context import ResultColumn, QueryContext
from .query_executor import QueryExecutor, QueryProcessor
from .processors import FriendlyNameProcessor, ParameterSubstitutionProcessor
from .templater import (
    QueryTemplater,
    UnsupportedParameterError,
    escape_value,
    find_placeholders,
    is_interval_literal,
    missing_parameters,
    substitute,
)

__all__ = [
    "ResultColumn",
    "QueryContext",
    "QueryExecutor",
    "QueryProcessor",
    "FriendlyNameProcessor",
    "ParameterSubstitutionProcessor",
    "QueryTemplater",
    "UnsupportedParameterError",
    "escape_value",
    "find_placeholders",
    "is_interval_literal",
    "missing_parameters",
    "substitute",
]
