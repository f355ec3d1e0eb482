"""pogo CLI entrypoint."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click

from pogo_cli import __version__
from pogo_cli.shared.cli import CLIContext, common_cli_options, handle_cli_errors, pass_cli_context
from pogo_cli.shared.config import OUTPUT_FORMATS
from pogo_cli.shared.database import connect
from pogo_cli.shared.exceptions import PogoError

from . import executor, operations, render, schema
from .operations import OperationRegistry
from .types import ExecutionContext, Result


def _format_option(func):
    return click.option(
        "--format",
        "output_format",
        type=click.Choice(OUTPUT_FORMATS),
        help="Output format (defaults to output.format from the config file).",
    )(func)


def _output_option(func):
    return click.option(
        "--output",
        "output_path",
        type=click.Path(dir_okay=False, path_type=Path),
        help="Write the result to a file instead of stdout.",
    )(func)


def _limit_option(func):
    return click.option(
        "--limit",
        type=int,
        help="Maximum rows to fetch; 0 fetches everything (defaults to output.row_limit).",
    )(func)


@click.group(help="Utility for inspecting and querying a PostgreSQL database.")
@click.version_option(version=__version__, prog_name="pogo")
@common_cli_options
@handle_cli_errors
def cli(cli_ctx: CLIContext) -> None:
    """Primary Click group for pogo commands."""
    cli_ctx.logger.debug(f"pogo started with config {cli_ctx.config.source_path}.")


@cli.command("describe")
@click.argument("table_name", required=False)
@_format_option
@_output_option
@pass_cli_context
def describe(
    cli_ctx: CLIContext,
    table_name: str | None,
    output_format: str | None,
    output_path: Path | None,
) -> None:
    """Describe the database, or the columns of TABLE_NAME."""
    _log_subcommand_entry(cli_ctx, "describe", table_name)
    try:
        with _execution_context(cli_ctx, _load_registry(cli_ctx)) as context:
            result = schema.describe(context, table_name)
    except PogoError as exc:
        raise click.ClickException(str(exc)) from exc
    except Exception as exc:  # pragma: no cover - safety net for unexpected errors
        if cli_ctx.verbose:
            raise
        raise click.ClickException(f"Failed to describe schema: {exc}") from exc

    _render(cli_ctx, result, output_format, output_path)


@cli.command("query")
@click.argument("sql", type=str)
@_limit_option
@_format_option
@_output_option
@pass_cli_context
def query(
    cli_ctx: CLIContext,
    sql: str,
    limit: int | None,
    output_format: str | None,
    output_path: Path | None,
) -> None:
    """Execute an arbitrary SQL statement."""
    _log_subcommand_entry(cli_ctx, "query")
    if not sql.strip():
        raise click.ClickException("Query text must not be empty.")

    try:
        with _execution_context(cli_ctx, _load_registry(cli_ctx)) as context:
            result = executor.execute(context, sql, limit=_effective_limit(cli_ctx, limit))
    except PogoError as exc:
        raise click.ClickException(str(exc)) from exc
    except Exception as exc:  # pragma: no cover - safety net for unexpected errors
        if cli_ctx.verbose:
            raise
        raise click.ClickException(f"Failed to execute SQL: {exc}") from exc

    _render(cli_ctx, result, output_format, output_path)


@cli.command("list")
@_format_option
@_output_option
@pass_cli_context
def list_command(cli_ctx: CLIContext, output_format: str | None, output_path: Path | None) -> None:
    """List available operations."""
    _log_subcommand_entry(cli_ctx, "list")
    try:
        registry = _load_registry(cli_ctx)
    except PogoError as exc:
        raise click.ClickException(str(exc)) from exc

    if not len(registry):
        cli_ctx.logger.info(f"No operations defined in {cli_ctx.config.operations.directory}.")
    _render(cli_ctx, operations.list_operations(registry), output_format, output_path)


@cli.command("run")
@click.argument("operation_name", type=str)
@_limit_option
@_format_option
@_output_option
@pass_cli_context
def run(
    cli_ctx: CLIContext,
    operation_name: str,
    limit: int | None,
    output_format: str | None,
    output_path: Path | None,
) -> None:
    """Run a user-defined operation by name."""
    _log_subcommand_entry(cli_ctx, "run", operation_name)
    try:
        registry = _load_registry(cli_ctx)
        # Resolve before connecting so an unknown name never touches the database.
        registry.get(operation_name)
        with _execution_context(cli_ctx, registry) as context:
            result = operations.run(context, operation_name, limit=_effective_limit(cli_ctx, limit))
    except PogoError as exc:
        raise click.ClickException(str(exc)) from exc
    except Exception as exc:  # pragma: no cover
        if cli_ctx.verbose:
            raise
        raise click.ClickException(f"Failed to run operation '{operation_name}': {exc}") from exc

    _render(cli_ctx, result, output_format, output_path)


def _log_subcommand_entry(cli_ctx: CLIContext, command: str, argument: str | None = None) -> None:
    message = f"pogo {command} invoked"
    if argument:
        message += f" ({argument})"
    cli_ctx.logger.debug(message)


def _load_registry(cli_ctx: CLIContext) -> OperationRegistry:
    directory = cli_ctx.config.operations.directory
    registry = operations.load_operations(directory)
    cli_ctx.logger.debug(f"Loaded {len(registry)} operation(s) from {directory}.")
    return registry


@contextmanager
def _execution_context(cli_ctx: CLIContext, registry: OperationRegistry) -> Iterator[ExecutionContext]:
    with connect(cli_ctx.config) as connection:
        yield ExecutionContext(connection=connection, operations=registry, logger=cli_ctx.logger)


def _effective_limit(cli_ctx: CLIContext, limit: int | None) -> int:
    if limit is None:
        return cli_ctx.config.output.row_limit
    return limit


def _render(
    cli_ctx: CLIContext,
    result: Result,
    output_format: str | None,
    output_path: Path | None,
) -> None:
    fmt = output_format or cli_ctx.config.output.format
    if output_path is None:
        render.render_result(result, output_format=fmt, logger=cli_ctx.logger)
        return

    try:
        with output_path.open("w", encoding="utf-8", newline="") as handle:
            render.render_result(result, output_format=fmt, logger=cli_ctx.logger, stream=handle)
    except OSError as exc:
        raise click.ClickException(f"Unable to write {output_path}: {exc}") from exc
    cli_ctx.logger.success(f"Wrote {len(result.rows)} row(s) to {output_path}.")


def main() -> None:
    """Entry point for console_scripts."""
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
