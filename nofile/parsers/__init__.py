"""Source-text parsers."""

from nofile.parsers.include_parser import extract_local_includes, is_local_include, strip_include

__all__ = ["extract_local_includes", "is_local_include", "strip_include"]
