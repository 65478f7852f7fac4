"""Diagnostics reported while validating input and traversing includes.

The traversal engine never prints. It hands ``Diagnostic`` records to a
``DiagnosticSink``; the CLI uses ``RichDiagnostics`` for coloured
console output, library callers and tests can use ``RecordingDiagnostics``.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol

from rich.console import Console
from rich.text import Text

from nofile.errors import (
    EntrypointReadError,
    InvalidFileExtError,
    NofileError,
    NotEnoughArgsError,
)

logger = logging.getLogger("nofile.runtime.diagnostics")

EXIT_BANNER = "------------ EXITING -----------"


class DiagnosticKind(str, Enum):
    """Kinds of diagnostics the tool can emit."""

    NOT_ENOUGH_ARGS = "not_enough_args"
    INVALID_ENTRYPOINT_EXTENSION = "invalid_entrypoint_extension"
    ENTRYPOINT_IO = "entrypoint_io"
    INVALID_INCLUDE_EXTENSION = "invalid_include_extension"


@dataclass(frozen=True)
class Diagnostic:
    """A single diagnostic.

    Attributes:
        kind: What went wrong.
        message: Human readable text.
        path: Offending path, if any.
        fatal: Whether processing must stop.
        origin: File in which the problem was found (traversal only).
    """

    kind: DiagnosticKind
    message: str
    path: Optional[str] = None
    fatal: bool = False
    origin: Optional[str] = None


class DiagnosticSink(Protocol):
    """Receiver for diagnostics. Implementations must be thread-safe."""

    def report(self, diagnostic: Diagnostic) -> None:
        ...


def invalid_include(path: str, origin: Optional[str] = None) -> Diagnostic:
    """Build the advisory diagnostic for an include without ``.c``/``.h``."""
    return Diagnostic(
        kind=DiagnosticKind.INVALID_INCLUDE_EXTENSION,
        message=(
            "You have given me a path to a file that does not contain a .c or "
            f".h extension: which is {path}"
        ),
        path=path,
        fatal=False,
        origin=origin,
    )


def diagnostic_from_error(error: NofileError) -> Diagnostic:
    """Map a fatal input error onto its diagnostic."""
    if isinstance(error, NotEnoughArgsError):
        kind = DiagnosticKind.NOT_ENOUGH_ARGS
    elif isinstance(error, InvalidFileExtError):
        kind = DiagnosticKind.INVALID_ENTRYPOINT_EXTENSION
    elif isinstance(error, EntrypointReadError):
        kind = DiagnosticKind.ENTRYPOINT_IO
    else:
        raise TypeError(f"No diagnostic mapping for {type(error).__name__}")
    return Diagnostic(
        kind=kind,
        message=str(error),
        path=getattr(error, "path", None),
        fatal=True,
    )


class RichDiagnostics:
    """Print diagnostics to a Rich console and mirror them to the log."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console(stderr=True)
        self._lock = threading.Lock()

    def report(self, diagnostic: Diagnostic) -> None:
        if diagnostic.fatal:
            logger.error("%s", diagnostic.message)
        else:
            logger.warning(
                "%s (included from %s)", diagnostic.message, diagnostic.origin or "?"
            )

        style = "red" if diagnostic.fatal else "yellow"
        with self._lock:
            self.console.print(Text(diagnostic.message, style=style))
            if diagnostic.kind is DiagnosticKind.ENTRYPOINT_IO:
                self.console.print(Text("Aborting, please rerun", style="red"))
            if diagnostic.fatal:
                self.console.print(Text(EXIT_BANNER, style="red"))


class RecordingDiagnostics:
    """Collect diagnostics in memory."""

    def __init__(self) -> None:
        self._items: List[Diagnostic] = []
        self._lock = threading.Lock()

    def report(self, diagnostic: Diagnostic) -> None:
        with self._lock:
            self._items.append(diagnostic)

    @property
    def diagnostics(self) -> List[Diagnostic]:
        with self._lock:
            return list(self._items)

    def of_kind(self, kind: DiagnosticKind) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.kind is kind]

    @property
    def has_fatal(self) -> bool:
        return any(d.fatal for d in self.diagnostics)


__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticSink",
    "EXIT_BANNER",
    "RecordingDiagnostics",
    "RichDiagnostics",
    "diagnostic_from_error",
    "invalid_include",
]
