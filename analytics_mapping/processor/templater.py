"""Substitution of {{name}} placeholders with escaped SQL literals.

The SQL API takes a raw text body with no parameter binding, so this module
is the only place where user values are turned into SQL. Numbers are written
unquoted, strings are single-quoted with embedded quotes doubled, and a
closed list of interval literals such as ``'7' DAY`` passes through as-is.
"""

import math
import re
from typing import Dict, List, Mapping, Union

ParameterValue = Union[str, int, float]

INTERVAL_UNITS = ("SECOND", "MINUTE", "HOUR", "DAY", "WEEK", "MONTH", "YEAR")

_INTERVAL_PATTERN = re.compile(
    r"'\d+'\s+(?:" + "|".join(INTERVAL_UNITS) + r")",
    re.IGNORECASE | re.ASCII,
)
_PLACEHOLDER_PATTERN = re.compile(r"\{\{([^{}]+)\}\}")


class UnsupportedParameterError(TypeError):
    """Raised for parameter values that are neither strings nor numbers."""

    def __init__(self, name: str, value: object):
        super().__init__(
            f"Parameter '{name}' has unsupported type {type(value).__name__}; "
            "use a string or a number"
        )
        self.name = name
        self.value = value


def is_interval_literal(value: str) -> bool:
    """Check for a pre-formatted interval such as ``'15' MINUTE``."""
    return _INTERVAL_PATTERN.fullmatch(value) is not None


def quote_string(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def format_number(value: Union[int, float]) -> str:
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Cannot use non-finite number {value} in a query")
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def escape_value(name: str, value: ParameterValue) -> str:
    """Render one parameter value as a SQL literal.

    Args:
        name: Parameter name, used in error messages
        value: String or number

    Returns:
        Literal text to put in place of the placeholder
    """
    # bool is an int subclass but has no SQL literal here
    if isinstance(value, bool):
        raise UnsupportedParameterError(name, value)
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, str):
        if is_interval_literal(value):
            return value
        return quote_string(value)
    raise UnsupportedParameterError(name, value)


def find_placeholders(sql: str) -> List[str]:
    """Placeholder names in order of first appearance."""
    names: List[str] = []
    for match in _PLACEHOLDER_PATTERN.finditer(sql):
        name = match.group(1)
        if name not in names:
            names.append(name)
    return names


def missing_parameters(sql: str, params: Mapping[str, ParameterValue]) -> List[str]:
    """Placeholder names that have no value in params."""
    return [name for name in find_placeholders(sql) if name not in params]


class QueryTemplater:
    """Replaces every ``{{name}}`` in query text with the escaped value."""

    def substitute(self, sql: str, params: Mapping[str, ParameterValue]) -> str:
        """Substitute all placeholders in one pass.

        Values are escaped before any replacement happens, and replaced text
        is never scanned again, so a value containing ``{{other}}`` stays
        literal. Placeholders without a parameter are left untouched.

        Args:
            sql: Raw query text
            params: Parameter values by name

        Returns:
            Query text ready to send to the backend
        """
        if not params:
            return sql
        literals: Dict[str, str] = {}
        for name, value in params.items():
            literals["{{" + name + "}}"] = escape_value(name, value)

        tokens = sorted(literals, key=len, reverse=True)
        pattern = re.compile("|".join(re.escape(token) for token in tokens))
        return pattern.sub(lambda match: literals[match.group(0)], sql)


def substitute(sql: str, params: Mapping[str, ParameterValue]) -> str:
    """Module-level shortcut for QueryTemplater().substitute."""
    return QueryTemplater().substitute(sql, params)
