"""Extraction of local ``#include`` directives from C source text.

Only lines that *start* with ``#include`` are considered. Lines that use
angle brackets or mention ``std`` anywhere are treated as system
includes and dropped; what remains is the quoted, project-relative path.
No preprocessing is performed, so conditional includes are always
followed.
"""

import logging
import re
from typing import List

logger = logging.getLogger("nofile.parsers.include_parser")

INCLUDE_DIRECTIVE = "#include"
STD_MARKER = "std"
SYSTEM_MARKER = "<"

QUOTED_INCLUDE_RE = re.compile(r'^#include\s*"(?P<path>[^"]*)"')


def is_local_include(line: str) -> bool:
    """Return True when ``line`` is a local (quoted, non-std) include."""
    return (
        line.startswith(INCLUDE_DIRECTIVE)
        and STD_MARKER not in line
        and SYSTEM_MARKER not in line
    )


def strip_include(line: str) -> str:
    """Remove the directive token and the quotes around the included path.

    Args:
        line: A line starting with ``#include``.

    Returns:
        str: The path between the quotes, e.g. ``util/list.h``.

    Raises:
        ValueError: If ``line`` does not start with ``#include``.
    """
    if not line.startswith(INCLUDE_DIRECTIVE):
        raise ValueError(f"Not an include directive: {line!r}")
    match = QUOTED_INCLUDE_RE.match(line)
    if match:
        return match.group("path")
    # Unterminated or unquoted form: keep whatever follows the token
    return line[len(INCLUDE_DIRECTIVE):].strip().strip('"')


def extract_local_includes(contents: str) -> List[str]:
    """Return the local include paths of ``contents`` in source order.

    Repeated includes of the same path are reported once.
    """
    seen = set()
    includes: List[str] = []
    for line in contents.splitlines():
        if not is_local_include(line):
            continue
        path = strip_include(line)
        if path in seen:
            continue
        seen.add(path)
        includes.append(path)

    logger.debug("Extracted %d local includes", len(includes))
    return includes


__all__ = [
    "INCLUDE_DIRECTIVE",
    "extract_local_includes",
    "is_local_include",
    "strip_include",
]
