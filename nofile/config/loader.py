"""Helpers for loading build configuration from TOML/JSON sources.

This module provides a single entry point `load_build_config` that
accepts various configuration sources:

* None -> default BuildConfig
* dict -> BuildConfig.from_dict
* Path / path-like string -> load .toml/.json from filesystem
* Inline JSON/TOML strings
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Union

from nofile.config.schema import BuildConfig

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger("nofile.config.loader")

ConfigSource = Union[str, Path, Dict[str, Any], None]


def _is_config_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        # Inline documents can exceed the platform path length
        return False


def _detect_format(text: str) -> str:
    stripped = text.lstrip()
    return "json" if stripped.startswith(("{", "[")) else "toml"


def load_build_config(source: ConfigSource) -> BuildConfig:
    """Load BuildConfig from various configuration sources.

    Args:
        source: One of:
            * None: returns BuildConfig.default()
            * dict: treated as already-parsed configuration mapping
            * str/Path: either a filesystem path to a .toml/.json file,
              or an inline TOML/JSON string (auto-detected)

    Returns:
        BuildConfig instance.

    Raises:
        ValueError: If the parsed document is not a mapping.
        pydantic.ValidationError: If a setting has an invalid value.
    """
    if source is None:
        logger.debug("No config source provided; using default BuildConfig")
        return BuildConfig.default()

    if isinstance(source, dict):
        logger.debug("Loading BuildConfig from provided dict")
        return BuildConfig.from_dict(source)

    if isinstance(source, (str, Path)):
        path = Path(source)
        text: Optional[str] = None
        fmt: Optional[str] = None

        if _is_config_file(path):
            text = path.read_text(encoding="utf-8")
            suffix = path.suffix.lower()
            if suffix in {".toml", ".tml"}:
                fmt = "toml"
            elif suffix == ".json":
                fmt = "json"
            else:
                fmt = _detect_format(text)
            logger.info("Loading configuration from file: %s (fmt=%s)", path, fmt)
        else:
            text = str(source)
            fmt = _detect_format(text)
            logger.info("Loading configuration from inline %s string", fmt)

        if fmt == "json":
            data = json.loads(text)
        else:
            data = tomllib.loads(text)

        if not isinstance(data, dict):
            raise ValueError("Top-level configuration must be a mapping/dict")

        return BuildConfig.from_dict(data)

    raise TypeError(f"Unsupported config source type: {type(source)!r}")


__all__ = ["load_build_config"]
