"""Main CLI entry point for nofile.

Usage: nofile <start1.c> <start2.c> ...

Run from the directory the entrypoints' relative includes are written
against; the Makefile is written to ``_Makefile`` there by default.
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from nofile import __version__
from nofile.cli.generate import generate_command

logger = logging.getLogger("nofile.cli")

PACKAGE_LOGGER = "nofile"
DIAGNOSTICS_LOGGER = "nofile.runtime.diagnostics"


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Route nofile's loggers through a RichHandler.

    Diagnostics are already printed by the console sink, so their log
    mirror is shown only when ``verbose`` is set. Verbose mode also turns
    on the debug records of nofile's own modules (per-file traversal
    events) while other libraries stay at INFO.

    Args:
        verbose: Enable verbose logging.
        console: Rich Console shared with the progress output (optional).
    """
    handler = RichHandler(
        console=console,
        show_time=verbose,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )

    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="[%(name)s] %(message)s",
        handlers=[handler],
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(
        logging.DEBUG if verbose else logging.WARNING
    )
    logging.getLogger(DIAGNOSTICS_LOGGER).setLevel(
        logging.DEBUG if verbose else logging.CRITICAL
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="nofile",
        description="Nofile - Makefile generator driven by local #include directives",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "entrypoints",
        nargs="*",
        help="C source files that each build one executable",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Makefile to write (default: _Makefile)",
    )
    parser.add_argument(
        "-w",
        "--workers",
        type=int,
        help="Maximum concurrent traversal workers (default: 8)",
    )
    parser.add_argument(
        "--cc",
        help="Compiler to put in the CC variable (default: gcc)",
    )
    parser.add_argument(
        "--config",
        help="Configuration file (.toml/.json) or inline TOML/JSON string",
    )
    parser.add_argument(
        "--graph-output",
        help="Also write the dependency graph as node-link JSON to this file",
    )
    parser.add_argument(
        "--no-echo",
        action="store_true",
        help="Do not print the generated Makefile",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    console = Console()
    setup_logging(args.verbose, console=console)
    logger.debug(
        "nofile %s starting with %d entrypoint(s)", __version__, len(args.entrypoints)
    )

    return generate_command(args, console=console)


if __name__ == "__main__":
    sys.exit(main())
