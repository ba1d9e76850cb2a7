"""Leveled status output for the graph and scheduler.

Nothing in the executor ever reads a value back from a reporter; it is a pure
side effect. Errors go to stderr, everything else to stdout.
"""

import sys
import threading
from typing import Protocol

from rich.console import Console
from rich.text import Text


class Reporter(Protocol):
    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def plan(self, message: str) -> None: ...


class NullReporter:
    """Discards every message."""

    def info(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass

    def warn(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass

    def plan(self, message: str) -> None:
        pass


LEVELS = {
    "info": ("[INFO]    ", ""),
    "success": ("[SUCCESS] ", "green"),
    "warn": ("[WARN]    ", "yellow"),
    "error": ("[ERROR]   ", "red"),
    "plan": ("[DRY-RUN] ", "cyan"),
}


class ConsoleReporter:
    """Colored terminal reporter built on rich."""

    def __init__(
        self,
        color: bool = True,
        stdout: Console | None = None,
        stderr: Console | None = None,
    ):
        self.stdout = stdout or Console(file=sys.stdout, no_color=not color, highlight=False)
        self.stderr = stderr or Console(file=sys.stderr, no_color=not color, highlight=False)
        self._lock = threading.Lock()

    def _emit(self, console: Console, level: str, message: str) -> None:
        prefix, style = LEVELS[level]
        # Text keeps task commands like "[x]" from being read as markup
        line = Text(prefix + message, style=style)
        with self._lock:
            console.print(line, soft_wrap=True)

    def info(self, message: str) -> None:
        self._emit(self.stdout, "info", message)

    def success(self, message: str) -> None:
        self._emit(self.stdout, "success", message)

    def warn(self, message: str) -> None:
        self._emit(self.stdout, "warn", message)

    def error(self, message: str) -> None:
        self._emit(self.stderr, "error", message)

    def plan(self, message: str) -> None:
        self._emit(self.stdout, "plan", message)
