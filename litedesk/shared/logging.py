"""Rich-based logging helpers shared across litedesk commands."""

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
        "error": "bold red",
        "success": "bold green",
        "debug": "dim",
        "statement": "dim magenta",
    }
)

# Result payloads go to stdout; everything the logger emits goes to stderr so
# `litedesk sql --format json` stays machine-readable. Highlighting is off so
# identifiers such as "ux_2024" never pick up ANSI sequences mid-string.
_payload_console = Console(theme=_THEME, highlight=False)
_log_console = Console(stderr=True, theme=_THEME, highlight=False)


@dataclass(slots=True)
class Logger:
    """Lightweight logger facade backed by Rich consoles."""

    verbose: bool = False

    @property
    def console(self) -> Console:
        return _payload_console

    def info(self, message: str) -> None:
        _log_console.print(message, style="info", markup=False)

    def success(self, message: str) -> None:
        _log_console.print(message, style="success", markup=False)

    def warning(self, message: str) -> None:
        _log_console.print(message, style="warning", markup=False)

    def error(self, message: str) -> None:
        _log_console.print(message, style="error", markup=False)

    def debug(self, message: str) -> None:
        if self.verbose:
            _log_console.print(message, style="debug", markup=False)

    def statement(self, sql: str) -> None:
        """Echo SQL about to run; verbose mode only."""
        if self.verbose:
            _log_console.print(f"> {sql}", style="statement", markup=False)


def get_logger(verbose: bool = False) -> Logger:
    """Return a configured Logger instance."""
    return Logger(verbose=verbose)
