"""Shared fixtures for nofile tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict

import pytest


@pytest.fixture
def c_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Callable[[Dict[str, str]], Path]:
    """Return a writer that lays out C files under a temp dir used as cwd.

    Include resolution is relative to the working directory, exactly as
    when the tool is run from a project root.
    """
    monkeypatch.chdir(tmp_path)

    def write(files: Dict[str, str]) -> Path:
        for rel_path, text in files.items():
            target = tmp_path / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
        return tmp_path

    return write
