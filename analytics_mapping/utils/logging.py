"""Log setup for the aeq CLI and query-tagged loggers.

Query results go to stdout, so every handler here writes to stderr or a file.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..config.config import LoggingConfig

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
TEXT_DATE_FORMAT = "%H:%M:%S"

# Chatty HTTP libraries; their DEBUG lines drown out query logs
QUIET_LOGGERS = ("urllib3", "requests")


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record, with query context merged in."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(getattr(record, "context", None) or {})
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _formatter(structured: bool) -> logging.Formatter:
    if structured:
        return JsonLineFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)


def _handlers(log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    return handlers


def setup_logging(config: LoggingConfig, level: Optional[str] = None) -> int:
    """Replace the root handlers according to the logging section.

    Args:
        config: Logging section of the aeq config
        level: Level name that overrides config.level, e.g. from --log-level

    Returns:
        The numeric level in effect
    """
    name = (level or config.level).upper()
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        numeric = logging.INFO

    formatter = _formatter(config.structured)
    handlers = _handlers(config.log_file)
    for handler in handlers:
        handler.setFormatter(formatter)
    logging.basicConfig(level=numeric, handlers=handlers, force=True)

    for quiet in QUIET_LOGGERS:
        logging.getLogger(quiet).setLevel(max(numeric, logging.WARNING))
    return numeric


class QueryLoggerAdapter(logging.LoggerAdapter):
    """Prefixes messages with ``[key=value]`` and keeps the pairs on the record."""

    def process(self, msg, kwargs):
        kwargs.setdefault("extra", {})["context"] = dict(self.extra)
        tags = " ".join(f"{key}={value}" for key, value in self.extra.items())
        return (f"[{tags}] {msg}" if tags else msg), kwargs


def get_query_logger(name: str, context: Dict[str, Any]) -> QueryLoggerAdapter:
    """Logger for one query run, e.g. ``get_query_logger(__name__, {"query_id": qid})``."""
    return QueryLoggerAdapter(logging.getLogger(name), context)
