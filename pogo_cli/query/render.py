"""Output rendering helpers for pogo."""

from __future__ import annotations

import csv
import json
import sys
from typing import IO

from rich import box
from rich.console import Console
from rich.table import Table

from pogo_cli.shared.logging import Logger

from .types import Result

HEADER_STYLE = "italic green"
ROW_STYLES = ("cyan", "")


def render_result(
    result: Result,
    *,
    output_format: str,
    logger: Logger,
    stream: IO[str] | None = None,
) -> None:
    """Render a result to the desired format."""
    output_stream = stream or sys.stdout
    fmt = (output_format or "table").lower()

    if fmt == "table":
        _render_table(result, logger=logger, stream=output_stream)
    elif fmt == "csv":
        _render_delimited(result, stream=output_stream, delimiter=",")
    elif fmt == "tsv":
        _render_delimited(result, stream=output_stream, delimiter="\t")
    elif fmt == "json":
        _render_json(result, stream=output_stream)
    else:  # pragma: no cover - Click validation should prevent this
        raise ValueError(f"Unsupported output format '{output_format}'.")

    if result.truncated:
        logger.warning(f"Result truncated to {len(result.rows)} rows. Re-run with --limit 0 for full output.")


def _render_table(result: Result, *, logger: Logger, stream: IO[str]) -> None:
    # Cells are database text; brackets in them must not be read as Rich markup.
    console = Console(file=stream, highlight=False, force_terminal=False, markup=False)
    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style=HEADER_STYLE,
        row_styles=list(ROW_STYLES),
    )
    for column in result.header:
        table.add_column(column, overflow="fold")

    for row in result.rows:
        table.add_row(*row)
    if not result.rows:
        logger.info("Query returned zero rows.")

    console.print(table)


def _render_delimited(result: Result, *, stream: IO[str], delimiter: str) -> None:
    writer = csv.writer(stream, delimiter=delimiter)
    writer.writerow(result.header)
    writer.writerows(result.rows)


def _render_json(result: Result, *, stream: IO[str]) -> None:
    records = [dict(zip(result.header, row)) for row in result.rows]
    json.dump(records, stream, indent=2)
    stream.write("\n")
