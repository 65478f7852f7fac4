"""Generate command implementation."""

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import ValidationError
from rich.console import Console
from rich.text import Text

from nofile.config import BuildConfig, load_build_config
from nofile.errors import (
    EntrypointReadError,
    InvalidFileExtError,
    NofileError,
    NotEnoughArgsError,
)
from nofile.graph.io import write_graph_json
from nofile.runtime.diagnostics import (
    DiagnosticSink,
    RichDiagnostics,
    diagnostic_from_error,
)
from nofile.runtime.driver import Entrypoint, run

logger = logging.getLogger("nofile.cli.generate")


def load_entrypoints(paths: Sequence[str]) -> List[Entrypoint]:
    """Validate and read the entrypoint files named on the command line.

    Args:
        paths: Paths as typed by the user.

    Returns:
        List[Entrypoint]: One record per path, in the given order.

    Raises:
        NotEnoughArgsError: If ``paths`` is empty.
        InvalidFileExtError: If a path does not end in ``.c``.
        EntrypointReadError: If a file cannot be read as UTF-8 text.
    """
    if not paths:
        raise NotEnoughArgsError()

    entrypoints: List[Entrypoint] = []
    for path in paths:
        if not path.endswith(".c"):
            raise InvalidFileExtError(path)
        try:
            contents = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise EntrypointReadError(path, exc) from exc
        entrypoints.append(Entrypoint(path, contents))
    return entrypoints


def resolve_config(args) -> BuildConfig:
    """Merge the optional config file with command-line overrides."""
    config = load_build_config(getattr(args, "config", None))

    overrides = {}
    if getattr(args, "cc", None) is not None:
        overrides["compiler"] = args.cc
    if getattr(args, "workers", None) is not None:
        overrides["workers"] = args.workers
    if getattr(args, "output", None) is not None:
        overrides["output"] = args.output
    if getattr(args, "no_echo", False):
        overrides["echo"] = False
    if not overrides:
        return config
    return BuildConfig.model_validate({**config.model_dump(), **overrides})


def generate_command(
    args,
    console: Optional[Console] = None,
    diagnostics: Optional[DiagnosticSink] = None,
) -> int:
    """Execute the generate command.

    Args:
        args: Parsed command-line arguments.
        console: Console for progress and the echoed Makefile.
        diagnostics: Sink for diagnostics; defaults to RichDiagnostics.

    Returns:
        int: Exit code.
    """
    console = console or Console()
    diagnostics = diagnostics or RichDiagnostics()

    try:
        config = resolve_config(args)
    except (ValidationError, ValueError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1
    logger.debug("Effective configuration: %s", config.model_dump())

    try:
        entrypoints = load_entrypoints(args.entrypoints)
    except NofileError as exc:
        diagnostics.report(diagnostic_from_error(exc))
        return exc.exit_code

    console.print("Valid files. Proceeding\n")
    makefile = run(entrypoints, config=config, diagnostics=diagnostics)

    graph_output = getattr(args, "graph_output", None)
    if graph_output:
        try:
            write_graph_json(makefile.dependencies.snapshot(), graph_output)
        except OSError as exc:
            console.print(
                Text(f"Graph export failed with error:\n {exc}", style="red")
            )
            return 1

    formatted = makefile.format()
    console.print(
        Text("Makefile construction succeeded. Outputing\n", style="green")
    )
    if config.echo:
        console.out(formatted, highlight=False)

    try:
        Path(config.output).write_text(formatted, encoding="utf-8")
    except OSError as exc:
        console.print(
            Text(f"File writing failed with error:\n {exc}", style="red")
        )
        return 1

    console.print(Text("--- SUCCESS ---", style="green"))
    logger.info("Makefile written to %s", config.output)
    return 0


__all__ = ["generate_command", "load_entrypoints", "resolve_config"]
