"""Configuration schema for nofile using Pydantic for validation."""

from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator

from nofile.makefile.synthesizer import DEFAULT_CFLAGS, DEFAULT_COMPILER
from nofile.runtime.traversal import DEFAULT_WORKERS

DEFAULT_OUTPUT = "_Makefile"


class BuildConfig(BaseModel):
    """Settings for one Makefile generation run.

    Attributes:
        compiler: Value of the ``CC`` variable.
        cflags: Base value of the ``CFLAGS`` variable.
        extra_flags: Flags appended to ``cflags`` (sorted, de-duplicated).
        workers: Maximum traversal threads.
        output: File the Makefile is written to.
        echo: Print the generated Makefile to the console.
    """

    compiler: str = DEFAULT_COMPILER
    cflags: str = DEFAULT_CFLAGS
    extra_flags: List[str] = Field(default_factory=list)
    workers: int = Field(default=DEFAULT_WORKERS, ge=1, le=256)
    output: str = DEFAULT_OUTPUT
    echo: bool = True

    model_config = {"extra": "allow"}

    @field_validator("compiler", "output")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject empty or whitespace-only values."""
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @field_validator("extra_flags")
    @classmethod
    def validate_flags(cls, v: List[str]) -> List[str]:
        """Drop blank entries."""
        return [flag.strip() for flag in v if flag.strip()]

    @classmethod
    def default(cls) -> "BuildConfig":
        """Return a BuildConfig instance with default values."""
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BuildConfig":
        """Create a BuildConfig from a plain mapping.

        Settings may sit at the top level or under a ``nofile`` table::

            [nofile]
            compiler = "clang"
            workers = 4
        """
        section = data.get("nofile", data)
        if not isinstance(section, dict):
            raise ValueError("The 'nofile' configuration section must be a table")
        return cls.model_validate(section)


__all__ = ["BuildConfig", "DEFAULT_OUTPUT"]
