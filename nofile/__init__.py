"""nofile - Makefile generation from the local includes of C entrypoints."""

from nofile.config import BuildConfig, load_build_config
from nofile.runtime.driver import Entrypoint, run

__version__ = "0.2.0"

__all__ = ["BuildConfig", "Entrypoint", "load_build_config", "run", "__version__"]
