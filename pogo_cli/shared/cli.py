"""Shared CLI helpers and decorators."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import Any, Callable, TypeVar, overload

import click

from .config import AppConfig, ensure_default_config, load_config
from .exceptions import ConfigurationError, PogoError
from .logging import Logger, get_logger

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(slots=True)
class CLIContext:
    """Runtime context shared across CLI invocations."""

    config: AppConfig
    verbose: bool
    logger: Logger


pass_cli_context = click.make_pass_decorator(CLIContext)


@overload
def common_cli_options(func: F) -> F: ...


@overload
def common_cli_options(*, bootstrap_config: bool = True) -> Callable[[F], F]: ...


def common_cli_options(func: F | None = None, *, bootstrap_config: bool = True):
    """Decorator injecting shared CLI options and context creation.

    With ``bootstrap_config`` enabled the config directory, the operations
    directory and a default config file are created on first run.
    """

    def decorator(inner: F) -> F:
        @click.option("--config", "config_path", type=click.Path(path_type=str), help="Path to config file.")
        @click.option(
            "--database",
            "connection_string",
            type=str,
            metavar="URL",
            help="Override the configured connection string.",
        )
        @click.option("--verbose", is_flag=True, help="Enable verbose logging output.")
        @click.pass_context
        @functools.wraps(inner)
        def wrapper(
            ctx: click.Context,
            *args: Any,
            config_path: str | None = None,
            connection_string: str | None = None,
            verbose: bool = False,
            **kwargs: Any,
        ) -> Any:
            logger = get_logger(verbose=verbose)
            try:
                if bootstrap_config:
                    created = ensure_default_config(config_path)
                    logger.debug(f"Using config file {created}")
                app_config = load_config(config_path)
            except ConfigurationError as exc:
                raise click.ClickException(f"Configuration error: {exc}") from exc
            except OSError as exc:
                raise click.ClickException(f"Unable to prepare config directory: {exc}") from exc

            if connection_string:
                app_config = app_config.with_connection_string(connection_string)

            cli_ctx = CLIContext(config=app_config, verbose=verbose, logger=logger)
            ctx.obj = cli_ctx
            kwargs["cli_ctx"] = cli_ctx
            return inner(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    if func is not None:
        return decorator(func)
    return decorator


def handle_cli_errors(func: F) -> F:
    """Convert project exceptions into Click-friendly errors."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except ConfigurationError as exc:
            raise click.ClickException(f"Configuration error: {exc}") from exc
        except PogoError as exc:
            raise click.ClickException(str(exc)) from exc
        except click.ClickException:
            raise
        except Exception as exc:  # pragma: no cover
            raise click.ClickException(f"Unexpected error: {exc}") from exc

    return wrapper  # type: ignore[return-value]
