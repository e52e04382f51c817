"""Cloudflare Workers Analytics Engine SQL API data source."""

from typing import Any, Callable, Dict, List, Optional
import logging

import pyarrow as pa
import requests
from sqlglot import exp

from ..config.config import DEFAULT_BASE_URL
from ..config.credentials import Credentials
from .base import ColumnMetadata, DataSource, QueryResult, TableMetadata

logger = logging.getLogger(__name__)

SQL_DIALECT = "clickhouse"


class AnalyticsEngineError(Exception):
    """Raised when the SQL API rejects a query or cannot be reached."""

    def __init__(self, message: str, status: Optional[int] = None, query: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.query = query

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"HTTP {self.status}: {self.message}"


def _to_int(value: Any) -> int:
    return int(value)


def _to_float(value: Any) -> float:
    return float(value)


def _to_str(value: Any) -> str:
    return str(value)


# meta type prefix -> (arrow type, converter); 64-bit ints arrive as strings
_TYPE_MAP = [
    ("UInt64", pa.uint64(), _to_int),
    ("UInt", pa.int64(), _to_int),
    ("Int", pa.int64(), _to_int),
    ("Float", pa.float64(), _to_float),
]


def arrow_type_for(meta_type: str):
    """Map an API column type to (arrow type, converter)."""
    inner = meta_type
    if inner.startswith("Nullable(") and inner.endswith(")"):
        inner = inner[len("Nullable("):-1]
    for prefix, arrow_type, converter in _TYPE_MAP:
        if inner.startswith(prefix):
            return arrow_type, converter
    # String, DateTime and anything unknown stay as text
    return pa.string(), _to_str


def build_arrow_table(data: List[Dict[str, Any]], meta: List[Dict[str, str]]) -> pa.Table:
    """Convert the API's row dicts into an Arrow table typed from meta."""
    if not meta and data:
        meta = [{"name": name, "type": "String"} for name in data[0].keys()]
    arrays = []
    names = []
    for column in meta:
        name = column["name"]
        arrow_type, converter = arrow_type_for(column.get("type", "String"))
        values = []
        for row in data:
            value = row.get(name)
            values.append(None if value is None else converter(value))
        arrays.append(pa.array(values, type=arrow_type))
        names.append(name)
    return pa.Table.from_arrays(arrays, names=names)


class AnalyticsEngineDataSource(DataSource):
    """Runs SQL against the Analytics Engine HTTP endpoint."""

    def __init__(
        self,
        name: str,
        config: Dict[str, Any],
        session_factory: Callable[[], requests.Session] = requests.Session,
    ):
        """Initialize the data source.

        Config should include:
            - credentials: resolved Credentials
            - base_url: API root (default: Cloudflare v4 API)
            - timeout_seconds: per-request timeout (default: 30)
        """
        super().__init__(name, config)
        self.credentials: Credentials = config["credentials"]
        self.base_url = config.get("base_url", DEFAULT_BASE_URL).rstrip("/")
        self.timeout = config.get("timeout_seconds", 30.0)
        self._session_factory = session_factory
        self.session: Optional[requests.Session] = None

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/accounts/{self.credentials.account_id}/analytics_engine/sql"

    def connect(self) -> None:
        """Validate credentials and open an HTTP session."""
        self.credentials.require()
        self.session = self._session_factory()
        self._connected = True
        logger.info(f"Using Analytics Engine credentials from {self.credentials.source}")

    def disconnect(self) -> None:
        """Close the HTTP session."""
        if self.session is not None:
            self.session.close()
            self.session = None
        self._connected = False

    def list_tables(self) -> List[str]:
        """List datasets via SHOW TABLES."""
        payload = self._post("SHOW TABLES")
        names = []
        for row in payload.get("data") or []:
            name = row.get("name")
            if not name and row:
                name = next(iter(row.values()))
            if name:
                names.append(str(name))
        return names

    def get_table_metadata(self, table: str) -> TableMetadata:
        """Read column names and types from a one-row sample query."""
        payload = self._post(self.build_sample_query(table))
        columns = []
        for column in payload.get("meta") or []:
            columns.append(ColumnMetadata(name=column["name"], data_type=column["type"]))
        return TableMetadata(table_name=table, columns=columns)

    def execute_query(self, query: str) -> QueryResult:
        """Execute query text exactly as given."""
        payload = self._post(query)
        data = payload.get("data") or []
        meta = payload.get("meta") or []
        rows = payload.get("rows") or 0
        total = payload.get("rows_before_limit_at_least") or rows
        return QueryResult(table=build_arrow_table(data, meta), row_count=rows, total_rows=total)

    @staticmethod
    def build_sample_query(table: str) -> str:
        """SELECT * FROM <table> LIMIT 1, with the name parsed as a table reference."""
        table_expr = exp.to_table(table, dialect=SQL_DIALECT)
        return exp.select("*").from_(table_expr).limit(1).sql(dialect=SQL_DIALECT)

    def _post(self, query: str) -> Dict[str, Any]:
        """POST query text and decode the JSON response."""
        account_id, api_token = self.credentials.require()
        self.ensure_connected()
        logger.debug(f"Executing query on {self.name}: {query[:200]}")
        headers = {
            "Authorization": f"Bearer {api_token}",
            "Content-Type": "text/plain",
        }
        try:
            response = self.session.post(
                self.endpoint, data=query.encode("utf-8"), headers=headers, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise AnalyticsEngineError(f"Request failed: {exc}", query=query) from exc

        if not response.ok:
            logger.warning(f"Query rejected with HTTP {response.status_code}")
            raise AnalyticsEngineError(response.text, status=response.status_code, query=query)

        try:
            return response.json()
        except ValueError as exc:
            raise AnalyticsEngineError(
                f"Invalid JSON in response: {exc}", status=response.status_code, query=query
            ) from exc
