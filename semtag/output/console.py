"""Console output abstraction.

Services report progress, warnings and debug traces through ConsoleProtocol
so they stay independent of the terminal backend. RichConsole is used by the
CLI, MockConsole captures output in tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
    "OutputRecord",
]

CLI_NAME = "semtag"


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DEBUG = auto()
    DIM = auto()

    def __str__(self) -> str:
        return self.name.lower()


class ConsoleProtocol(Protocol):
    """Protocol for console output."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Print a message with optional styling."""
        ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def debug(self, message: str) -> None:
        """Print a trace line; implementations drop it unless debugging is on."""
        ...


class RichConsole:
    """Console implementation using Rich.

    Args:
        debug: Emit debug traces.
        quiet: Suppress everything but errors (used with JSON output so
            stdout stays machine readable).
    """

    def __init__(self, *, debug: bool = False, quiet: bool = False) -> None:
        from rich.console import Console

        self._console = Console(highlight=False)
        self._err_console = Console(stderr=True, highlight=False)
        self._debug = debug
        self._quiet = quiet
        self._style_map = {
            Style.DEFAULT: "",
            Style.SUCCESS: "green",
            Style.ERROR: "red bold",
            Style.WARNING: "yellow bold",
            Style.INFO: "cyan",
            Style.DEBUG: "magenta",
            Style.DIM: "dim",
        }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        if self._quiet:
            return
        rich_style = self._style_map.get(style, "")
        if rich_style:
            self._console.print(message, style=rich_style)
        else:
            self._console.print(message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._console.print(f"[magenta bold]{CLI_NAME}[/] : [green bold]{message}[/]")

    def error(self, message: str) -> None:
        self._err_console.print(f"[red bold]error:[/red bold] {message}")

    def warning(self, message: str) -> None:
        if not self._quiet:
            self._console.print(f"[magenta bold]{CLI_NAME}[/] : [yellow bold]{message}[/]")

    def info(self, message: str) -> None:
        if not self._quiet:
            self._console.print(f"[magenta bold]{CLI_NAME}[/] : {message}")

    def debug(self, message: str) -> None:
        if self._debug and not self._quiet:
            self._console.print(f"[magenta bold]{CLI_NAME}[/] : [dim]{message}[/dim]")


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.SUCCESS))

    def error(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"error: {message}", Style.ERROR))

    def warning(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.WARNING))

    def info(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.INFO))

    def debug(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.DEBUG))

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_warning(self) -> bool:
        return any(o.style == Style.WARNING for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """Find all outputs containing a substring."""
        return [o for o in self.outputs if substring in o.message]
