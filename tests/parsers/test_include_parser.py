"""Tests for local include extraction."""

import pytest

from nofile.parsers.include_parser import (
    extract_local_includes,
    is_local_include,
    strip_include,
)


def test_extracts_quoted_includes_in_order() -> None:
    """Quoted includes are returned in source order."""
    text = '#include "b.h"\nint x;\n#include "lib/c.h"\n'
    assert extract_local_includes(text) == ["b.h", "lib/c.h"]


def test_skips_system_and_std_includes() -> None:
    """Angle brackets and anything mentioning std are system includes."""
    text = "\n".join(
        [
            "#include <stdio.h>",
            "#include <list.h>",
            '#include "stdbool_compat.h"',
            '#include "mine.h"',
        ]
    )
    assert extract_local_includes(text) == ["mine.h"]


def test_only_lines_starting_with_directive_count() -> None:
    """Indented or spaced directives and comments are not followed."""
    text = '  #include "indented.h"\n# include "spaced.h"\n// #include "c.h"\n'
    assert extract_local_includes(text) == []


def test_repeated_includes_reported_once() -> None:
    """Duplicate directives collapse to one entry."""
    text = '#include "a.h"\n#include "a.h"\n'
    assert extract_local_includes(text) == ["a.h"]


def test_handles_crlf_line_endings() -> None:
    """Windows line endings do not leak into paths."""
    assert extract_local_includes('#include "a.h"\r\n#include "b.c"\r\n') == ["a.h", "b.c"]


@pytest.mark.parametrize(
    "line, expected",
    [
        ('#include "a.h"', "a.h"),
        ('#include"a.h"', "a.h"),
        ('#include "dir/a.h" // comment', "dir/a.h"),
        ('#include "unterminated.h', "unterminated.h"),
        ("#include bare.h", "bare.h"),
    ],
)
def test_strip_include(line: str, expected: str) -> None:
    """The directive token and quotes are removed."""
    assert strip_include(line) == expected


def test_strip_include_requires_directive() -> None:
    """Lines without the directive are rejected."""
    with pytest.raises(ValueError):
        strip_include('int main(void) { return 0; }')


def test_is_local_include() -> None:
    """Classification mirrors the extraction filter."""
    assert is_local_include('#include "x.h"')
    assert not is_local_include("#include <x.h>")
    assert not is_local_include('#include "std.h"')
    assert not is_local_include("int x;")
