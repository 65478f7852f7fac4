"""Exception hierarchy for nofile.

Two families live here:

* ``NofileError`` - user-facing input problems (missing arguments, wrong
  extension, unreadable entrypoint). They are fatal at the process
  boundary and are turned into diagnostics by the CLI.
* ``InvariantViolation`` - broken internal preconditions. These are
  defects, not user errors, and are never caught by library code.
"""

from typing import Optional


class NofileError(Exception):
    """Base class for fatal input errors reported before any traversal."""

    exit_code: int = 1


class NotEnoughArgsError(NofileError):
    """Raised when no entrypoint paths were supplied."""

    def __init__(self) -> None:
        super().__init__(
            "You have not given me enough arguments, please pass at least one .c file"
        )


class InvalidFileExtError(NofileError):
    """Raised when a supplied entrypoint does not end in ``.c``."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            f"You have given me a path to a file that does not contain a .c "
            f"extension: which is {path}"
        )


class EntrypointReadError(NofileError):
    """Raised when an entrypoint file cannot be read as UTF-8 text."""

    def __init__(self, path: str, cause: Optional[BaseException] = None) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"{cause} <- for file {path}")


class InvariantViolation(RuntimeError):
    """A precondition elsewhere in the pipeline was broken. This is a bug."""


class ExtensionContractError(InvariantViolation):
    """Extension swap or strip requested on a name without ``.c``/``.h``."""

    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__(
            f"Expected a file name ending in .c or .h, got {filename!r}"
        )


class UnknownEntrypointError(InvariantViolation):
    """Dependencies requested for an entrypoint that was never seeded."""

    def __init__(self, entrypoint: str) -> None:
        self.entrypoint = entrypoint
        super().__init__(
            f"Asked for the dependencies of {entrypoint}, but {entrypoint} "
            "was never seeded into the dependency graph"
        )


class GraphFrozenError(InvariantViolation):
    """Mutation attempted on a dependency graph that was frozen or drained."""


__all__ = [
    "EntrypointReadError",
    "ExtensionContractError",
    "GraphFrozenError",
    "InvalidFileExtError",
    "InvariantViolation",
    "NofileError",
    "NotEnoughArgsError",
    "UnknownEntrypointError",
]
