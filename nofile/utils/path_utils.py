"""Path handling for C include resolution.

Paths are kept as plain ``/``-separated strings rather than ``pathlib``
objects: include directives are resolved by textual directory
concatenation, and the resulting strings double as graph keys and as
tokens written into the generated Makefile.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from nofile.errors import ExtensionContractError

SEPARATOR = "/"
SOURCE_EXTENSION = "c"
HEADER_EXTENSION = "h"
_KNOWN_SUFFIXES = ("." + SOURCE_EXTENSION, "." + HEADER_EXTENSION)


def has_c_family_extension(name: str) -> bool:
    """Return True when ``name`` ends in ``.c`` or ``.h``."""
    return name.endswith(_KNOWN_SUFFIXES)


def swap_extension(name: str, ext: str) -> str:
    """Replace the trailing ``.c``/``.h`` of ``name`` with ``.<ext>``.

    Args:
        name: File name or full path ending in ``.c`` or ``.h``.
        ext: Target extension, ``"c"`` or ``"h"``.

    Returns:
        The name with its one-letter extension replaced.

    Raises:
        ExtensionContractError: If ``name`` has no C-family extension.
        ValueError: If ``ext`` is not ``"c"`` or ``"h"``.

    Examples:
        >>> swap_extension("lib/list.h", "c")
        'lib/list.c'
    """
    if ext not in (SOURCE_EXTENSION, HEADER_EXTENSION):
        raise ValueError(f"Unsupported extension {ext!r}, expected 'c' or 'h'")
    if not has_c_family_extension(name):
        raise ExtensionContractError(name)
    return name[:-1] + ext


@dataclass(frozen=True)
class PathKey:
    """A path split into ``(directory, filename)``.

    ``directory`` is empty or ends with ``/``; ``filename`` never contains
    a separator, so ``directory + filename`` is the original path.
    """

    directory: str
    filename: str

    @classmethod
    def parse(cls, raw: str) -> "PathKey":
        """Split ``raw`` at its last separator.

        A leading ``./`` is dropped from the directory so that ``./a.c``
        and ``a.c`` produce the same key. Any string is accepted.

        Examples:
            >>> PathKey.parse("src/util/list.h")
            PathKey(directory='src/util/', filename='list.h')
            >>> PathKey.parse("./main.c")
            PathKey(directory='', filename='main.c')
        """
        cut = raw.rfind(SEPARATOR) + 1
        directory, filename = raw[:cut], raw[cut:]
        if directory.startswith("./"):
            directory = directory[2:]
        return cls(directory, filename)

    def compose(self, relative: "PathKey") -> "PathKey":
        """Resolve ``relative`` against this path's directory.

        The filename of ``self`` is discarded: an include found inside
        ``src/a.c`` that reads ``"util/b.h"`` becomes ``src/util/b.h``.
        """
        return PathKey(self.directory + relative.directory, relative.filename)

    def with_extension(self, ext: str) -> "PathKey":
        """Return a copy whose filename ends in ``.<ext>`` instead.

        Raises:
            ExtensionContractError: If the filename is not ``.c``/``.h``.
        """
        return PathKey(self.directory, swap_extension(self.filename, ext))

    def combined(self) -> str:
        """Directory and filename joined back into one path string."""
        return self.directory + self.filename

    @property
    def has_known_extension(self) -> bool:
        return has_c_family_extension(self.filename)

    @property
    def is_source(self) -> bool:
        return self.filename.endswith("." + SOURCE_EXTENSION)

    @property
    def is_header(self) -> bool:
        return self.filename.endswith("." + HEADER_EXTENSION)

    def __str__(self) -> str:
        return self.combined()


@dataclass(frozen=True, eq=False)
class DependencyIdentity:
    """A raw path compared and hashed by file name only.

    ``DependencyIdentity("lib/util.c") == DependencyIdentity("util.c")``
    holds: same-named files in different directories are the same
    dependency as far as the graph is concerned. Traversal relies on this
    rule to stop re-entering a file it has already recorded, so it must
    not be tightened to full-path equality.
    """

    path: str
    filename: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "filename", PathKey.parse(self.path).filename)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DependencyIdentity):
            return NotImplemented
        return self.filename == other.filename

    def __hash__(self) -> int:
        return hash(self.filename)

    def __str__(self) -> str:
        return self.path


__all__ = [
    "DependencyIdentity",
    "HEADER_EXTENSION",
    "PathKey",
    "SEPARATOR",
    "SOURCE_EXTENSION",
    "has_c_family_extension",
    "swap_extension",
]
