"""Interactive CLI for Analytics Engine queries and column mappings."""

from __future__ import annotations

import re
import time
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import click
import pyarrow as pa
import yaml
from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from sqlglot import errors as sqlglot_errors

from ..catalog import CATEGORY_LABELS, Catalog, ColumnSchema
from ..config import (
    Config,
    Credentials,
    MissingCredentialsError,
    load_config,
    resolve_credentials,
)
from ..datasources import AnalyticsEngineDataSource, AnalyticsEngineError, QueryResult
from ..mapping import MappingCollection, MappingEditor, PasteEvent, from_records
from ..processor import (
    FriendlyNameProcessor,
    ParameterSubstitutionProcessor,
    QueryExecutor,
    UnsupportedParameterError,
)
from ..processor.templater import ParameterValue
from ..utils.logging import setup_logging

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.[0-9]*|\.[0-9]+)")


def parse_param_value(text: str) -> ParameterValue:
    """Turn a `.set` argument into a number or string.

    Integers and decimals become numbers. Double quotes force a string, so
    `"10"` is the text 10. Anything else is used as typed, which lets
    interval literals like `'7' DAY` through unchanged.
    """
    stripped = text.strip()
    if len(stripped) >= 2 and stripped.startswith('"') and stripped.endswith('"'):
        return stripped[1:-1]
    if _INTEGER_PATTERN.fullmatch(stripped):
        return int(stripped)
    if _DECIMAL_PATTERN.fullmatch(stripped):
        return float(stripped)
    return stripped


def load_mappings(path: Path, schema: ColumnSchema) -> MappingCollection:
    """Read a YAML list of mapping records; a missing file means no mappings.

    Records are checked against the schema: types come from the schema and
    blank names or unknown columns are dropped.
    """
    if not path.exists():
        return MappingCollection()
    with open(path, "r") as f:
        records = yaml.safe_load(f)
    if not records:
        return MappingCollection()
    if not isinstance(records, list):
        raise ValueError(f"Mappings file {path} must contain a list")
    return from_records(records, schema)


def save_mappings(path: Path, mappings: MappingCollection) -> None:
    with open(path, "w") as f:
        yaml.safe_dump(mappings.to_records(), f, sort_keys=False)


class AeqRuntime:
    """Wires credentials, data source, mappings and the query pipeline."""

    def __init__(
        self,
        config: Config,
        credentials: Credentials,
        mappings: Optional[MappingCollection] = None,
        mappings_path: Optional[Path] = None,
        datasource: Optional[AnalyticsEngineDataSource] = None,
    ):
        self.config = config
        self.credentials = credentials
        self.schema = ColumnSchema(config.schema)
        self.mappings_path = mappings_path
        self.editor = MappingEditor(
            self.schema,
            mappings=mappings,
            preserve_empty_fields=config.paste.preserve_empty_fields,
        )
        if datasource is None:
            datasource = AnalyticsEngineDataSource(
                "analytics_engine",
                {
                    "credentials": credentials,
                    "base_url": config.backend.base_url,
                    "timeout_seconds": config.backend.timeout_seconds,
                },
            )
        self.datasource = datasource
        self.catalog = Catalog(datasource)
        self.params: Dict[str, ParameterValue] = {}
        processors = [
            ParameterSubstitutionProcessor(),
            FriendlyNameProcessor(lambda: self.editor.mappings),
        ]
        self.query_executor = QueryExecutor(datasource, processors=processors)

    def execute(self, sql: str) -> QueryResult:
        """Run a query with the current parameters."""
        return self.query_executor.execute(sql, self.params)

    def save(self) -> Path:
        if self.mappings_path is None:
            raise ValueError("No mappings file given; start aeq with --mappings PATH")
        save_mappings(self.mappings_path, self.editor.mappings)
        return self.mappings_path


class ResultPrinter:
    """Formats Arrow tables for CLI display."""

    def __init__(self, emit):
        self.emit = emit

    def display(self, result: QueryResult, elapsed_ms: float) -> None:
        table = result.table
        rows = self._build_rows(table)
        headers = list(table.schema.names)
        for line in self._format_table(headers, rows):
            self.emit(line)
        summary = f"{table.num_rows} rows in {elapsed_ms:.2f} ms"
        if result.total_rows > table.num_rows:
            summary += f" ({result.total_rows} before LIMIT)"
        self.emit(summary)

    def _build_rows(self, table: pa.Table) -> List[List[object]]:
        columns = [table.column(index).to_pylist() for index in range(table.num_columns)]
        rows: List[List[object]] = []
        for row_index in range(table.num_rows):
            rows.append([column[row_index] for column in columns])
        return rows

    def _format_table(self, headers: List[str], rows: List[List[object]]) -> List[str]:
        widths = self._compute_widths(headers, rows)
        border = self._build_border(widths)
        lines: List[str] = [border, self._format_row(headers, widths), border]
        for row in rows:
            lines.append(self._format_row([self._stringify_cell(v) for v in row], widths))
        lines.append(border)
        return lines

    def _compute_widths(self, headers: List[str], rows: List[List[object]]) -> List[int]:
        widths = [len(header) for header in headers]
        for row in rows:
            for col_index, value in enumerate(row):
                text = self._stringify_cell(value)
                if len(text) > widths[col_index]:
                    widths[col_index] = len(text)
        return widths

    def _build_border(self, widths: List[int]) -> str:
        return "+" + "+".join("-" * (width + 2) for width in widths) + "+"

    def _format_row(self, values: List[str], widths: List[int]) -> str:
        cells = [f" {value.ljust(widths[index])} " for index, value in enumerate(values)]
        return "|" + "|".join(cells) + "|"

    def _stringify_cell(self, value: object) -> str:
        if value is None:
            return "NULL"
        return str(value)


class MappingPrinter:
    """Prints mappings per column category."""

    def __init__(self, emit):
        self.emit = emit

    def display(self, editor: MappingEditor) -> None:
        self.emit(f"Column Mappings ({len(editor.mappings)} mapped)")
        for category in editor.schema.categories():
            columns = editor.schema.columns_by_category(category)
            label = CATEGORY_LABELS[category]
            self.emit(f"\n{label} [{editor.mapped_count(category)}/{len(columns)}]")
            for column in columns:
                mapping = editor.mapping_for(column)
                if mapping is None:
                    continue
                line = f"  {column} -> {mapping.friendly_name}"
                if mapping.description:
                    line += f"  ({mapping.description})"
                self.emit(line)


class AeqRepl:
    """Interactive loop with full terminal support."""

    def __init__(self, runtime: AeqRuntime, emit=click.echo):
        self.runtime = runtime
        self.emit = emit
        self.printer = ResultPrinter(emit)
        self.mapping_printer = MappingPrinter(emit)
        self.session: Optional[PromptSession] = None
        self.shortcuts = {
            ".health": self._show_health,
            ".datasets": self._show_datasets,
            ".schema": self._show_schema,
            ".set": self._set_param,
            ".unset": self._unset_param,
            ".params": self._show_params,
            ".map": self._map_column,
            ".unmap": self._unmap_column,
            ".paste": self._paste,
            ".mappings": self._show_mappings,
            ".save": self._save,
        }

    def _create_session(self) -> PromptSession:
        """Create prompt session backed by persistent history."""
        history_path = Path(".aeq_history")
        if not history_path.exists():
            history_path.touch()
        return PromptSession(
            history=FileHistory(str(history_path)),
            auto_suggest=AutoSuggestFromHistory(),
        )

    def run(self) -> None:
        if self.session is None:
            self.session = self._create_session()
        buffer: List[str] = []
        while True:
            line, should_continue = self._read_line(buffer)
            if not should_continue:
                break
            if line is None:
                continue
            if self._is_exit_command(line):
                break
            if not buffer and line.strip().startswith("."):
                self.execute_shortcut(line)
                continue
            buffer.append(line)
            if line.strip().endswith(";"):
                statement = "\n".join(buffer)
                buffer.clear()
                self.execute_query(statement)

    def _read_line(self, buffer: List[str]) -> Tuple[Optional[str], bool]:
        prompt = "...> " if buffer else "aeq> "
        try:
            return self.session.prompt(prompt), True
        except EOFError:
            self.emit("")
            return None, False
        except KeyboardInterrupt:
            self.emit("")
            buffer.clear()
            return None, True

    def _is_exit_command(self, line: str) -> bool:
        return line.strip().lower() in ("\\q", "quit", "exit")

    def execute_shortcut(self, line: str) -> None:
        command, _, argument = line.strip().partition(" ")
        handler = self.shortcuts.get(command.lower())
        if handler is None:
            self.emit(f"Unknown shortcut: {command}")
            self.emit("Available shortcuts: " + ", ".join(self.shortcuts))
            return
        try:
            handler(argument.strip())
        except (
            ValueError,
            AnalyticsEngineError,
            MissingCredentialsError,
            sqlglot_errors.ParseError,
        ) as exc:
            self.emit(f"error: {exc}")

    def execute_query(self, statement: str) -> None:
        clean = statement.strip()
        if clean.endswith(";"):
            clean = clean[:-1].rstrip()
        if not clean:
            return
        try:
            start = time.time()
            result = self.runtime.execute(clean)
            elapsed = (time.time() - start) * 1000
            self.printer.display(result, elapsed)
        except (
            ValueError,
            AnalyticsEngineError,
            MissingCredentialsError,
            UnsupportedParameterError,
        ) as exc:
            self.emit(f"error: {exc}")

    def _show_health(self, argument: str) -> None:
        credentials = self.runtime.credentials
        self.emit(f"credentials source: {credentials.source}")
        self.emit(f"has credentials: {'yes' if credentials.available else 'no'}")

    def _show_datasets(self, argument: str) -> None:
        names = self.runtime.catalog.list_datasets(refresh=True)
        if not names:
            self.emit("No datasets found.")
            return
        for name in names:
            self.emit(f"  {name}")

    def _show_schema(self, argument: str) -> None:
        if not argument:
            raise ValueError("usage: .schema DATASET")
        dataset = self.runtime.catalog.get_dataset(argument)
        self.emit(f"Dataset: {dataset.name}")
        for column in dataset.columns:
            mapping = self.runtime.editor.mapping_for(column.name)
            line = f"  - {column.name}: {column.data_type}"
            if mapping is not None:
                line += f"  -> {mapping.friendly_name}"
            self.emit(line)

    def _set_param(self, argument: str) -> None:
        name, _, raw_value = argument.partition(" ")
        if not name or not raw_value.strip():
            raise ValueError("usage: .set NAME VALUE")
        value = parse_param_value(raw_value)
        self.runtime.params[name] = value
        self.emit(f"{name} = {value!r}")

    def _unset_param(self, argument: str) -> None:
        if self.runtime.params.pop(argument, None) is None:
            self.emit(f"No parameter named {argument}")

    def _show_params(self, argument: str) -> None:
        if not self.runtime.params:
            self.emit("No parameters set.")
            return
        for name, value in self.runtime.params.items():
            self.emit(f"  {name} = {value!r}")

    def _map_column(self, argument: str) -> None:
        column, _, friendly_name = argument.partition(" ")
        if not column:
            raise ValueError("usage: .map COLUMN [NAME]")
        if self.runtime.schema.lookup_type(column) is None:
            raise ValueError(f"Unknown column: {column}")
        self.runtime.editor.change(column, friendly_name.strip())

    def _unmap_column(self, argument: str) -> None:
        self.runtime.editor.remove(argument)

    def _paste(self, argument: str) -> None:
        column, _, text = argument.partition(" ")
        if not column or not text:
            raise ValueError("usage: .paste COLUMN VALUE, VALUE, ...")
        if self.runtime.schema.lookup_type(column) is None:
            raise ValueError(f"Unknown column: {column}")
        if self.runtime.editor.paste(PasteEvent(text=text), column):
            self.mapping_printer.display(self.runtime.editor)
            return
        # Not CSV-like: same as typing the value into the field
        self.runtime.editor.change(column, text.strip())

    def _show_mappings(self, argument: str) -> None:
        self.mapping_printer.display(self.runtime.editor)

    def _save(self, argument: str) -> None:
        path = self.runtime.save()
        self.emit(f"Saved {len(self.runtime.editor.mappings)} mappings to {path}")


def _prepare_runtime(
    config_path: Optional[str],
    account_id: Optional[str],
    api_token: Optional[str],
    mappings_path: Optional[str],
) -> AeqRuntime:
    config = load_config(config_path) if config_path else Config()
    if account_id:
        config.backend.account_id = account_id
    if api_token:
        config.backend.api_token = api_token
    credentials = resolve_credentials(config.backend)
    path = Path(mappings_path) if mappings_path else None
    mappings = load_mappings(path, ColumnSchema(config.schema)) if path else None
    return AeqRuntime(config, credentials, mappings=mappings, mappings_path=path)


@click.command()
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, readable=True),
    help="Path to YAML config file.",
)
@click.option("--account-id", help="Cloudflare account id.")
@click.option("--api-token", help="Cloudflare API token.")
@click.option(
    "-m",
    "--mappings",
    "mappings_path",
    type=click.Path(dir_okay=False),
    help="YAML file to load column mappings from and .save them to.",
)
@click.option("--log-level", default=None, help="Override the configured log level.")
def cli(
    config_path: Optional[str],
    account_id: Optional[str],
    api_token: Optional[str],
    mappings_path: Optional[str],
    log_level: Optional[str],
) -> None:
    """Entry point for the aeq CLI."""
    try:
        runtime = _prepare_runtime(config_path, account_id, api_token, mappings_path)
    except (ValueError, TypeError, yaml.YAMLError) as exc:
        raise click.ClickException(str(exc)) from exc
    setup_logging(runtime.config.logging, level=log_level)
    if not runtime.credentials.available:
        click.echo(str(MissingCredentialsError()))
    click.echo("Type SQL statements terminated by ';'. Use \\q to exit.")
    click.echo("Use {{name}} placeholders and .set NAME VALUE to fill them.")
    try:
        AeqRepl(runtime).run()
    finally:
        runtime.datasource.disconnect()
