"""Configuration schema and loading for nofile."""

from .loader import load_build_config
from .schema import BuildConfig, DEFAULT_OUTPUT

__all__ = [
    "BuildConfig",
    "DEFAULT_OUTPUT",
    "load_build_config",
]
