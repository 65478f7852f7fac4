"""Tests for BuildConfig and load_build_config."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from nofile.config import BuildConfig, load_build_config


def test_defaults_match_generated_makefile() -> None:
    """Defaults reproduce the stock compiler line and output name."""
    config = load_build_config(None)

    assert config.compiler == "gcc"
    assert config.cflags == "-Wall -g -pedantic -std=c99"
    assert config.extra_flags == []
    assert config.workers == 8
    assert config.output == "_Makefile"
    assert config.echo is True


def test_dict_with_nofile_table() -> None:
    """Settings may be nested under a nofile table."""
    config = load_build_config({"nofile": {"compiler": "clang", "workers": 2}})
    assert config.compiler == "clang"
    assert config.workers == 2


def test_toml_file(tmp_path: Path) -> None:
    """TOML files are detected by suffix."""
    path = tmp_path / "nofile.toml"
    path.write_text(
        '[nofile]\ncompiler = "cc"\nextra_flags = ["-O2", " "]\necho = false\n',
        encoding="utf-8",
    )

    config = load_build_config(path)

    assert config.compiler == "cc"
    assert config.extra_flags == ["-O2"]
    assert config.echo is False


def test_json_file_and_inline_strings(tmp_path: Path) -> None:
    """JSON files and inline JSON/TOML strings are accepted."""
    path = tmp_path / "settings.json"
    path.write_text('{"output": "Makefile"}', encoding="utf-8")

    assert load_build_config(str(path)).output == "Makefile"
    assert load_build_config('{"workers": 3}').workers == 3
    assert load_build_config('compiler = "tcc"').compiler == "tcc"


@pytest.mark.parametrize(
    "data",
    [{"workers": 0}, {"workers": 1000}, {"compiler": "   "}, {"output": ""}],
)
def test_invalid_values_are_rejected(data) -> None:
    """Out-of-range or blank settings fail validation."""
    with pytest.raises(ValidationError):
        BuildConfig.from_dict(data)


def test_non_mapping_document_is_rejected() -> None:
    """A JSON array is not a configuration."""
    with pytest.raises(ValueError):
        load_build_config("[1, 2]")


def test_unsupported_source_type() -> None:
    """Only None, dicts, strings and paths are accepted."""
    with pytest.raises(TypeError):
        load_build_config(42)  # type: ignore[arg-type]
