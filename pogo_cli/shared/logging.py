"""Rich-based logging helpers shared across pogo commands."""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.theme import Theme
from rich.traceback import install

install(show_locals=False)

_THEME = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "success": "bold green",
        "debug": "dim",
        "sql": "dim italic",
    }
)

# Log chatter goes to stderr so csv/json piped from stdout stays clean.
# Highlighting is off so numbers inside messages are not wrapped in ANSI styles.
_stderr_console = Console(stderr=True, theme=_THEME, highlight=False)
_verbose_console = Console(stderr=True, theme=_THEME, highlight=False)


@dataclass(slots=True)
class Logger:
    """Lightweight logger facade backed by Rich consoles."""

    verbose: bool = False

    def info(self, message: str) -> None:
        _stderr_console.print(message, style="info", markup=False)

    def success(self, message: str) -> None:
        _stderr_console.print(message, style="success", markup=False)

    def warning(self, message: str) -> None:
        _stderr_console.print(message, style="warning", markup=False)

    def debug(self, message: str) -> None:
        if self.verbose:
            _verbose_console.print(message, style="debug", markup=False)

    def statement(self, sql: str) -> None:
        """Echo a statement about to be sent to the server (verbose only)."""
        if self.verbose:
            _verbose_console.print(sql.strip(), style="sql", markup=False)


def get_logger(verbose: bool = False) -> Logger:
    """Return a configured Logger instance."""
    return Logger(verbose=verbose)
