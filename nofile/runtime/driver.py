"""Top-level orchestration: entrypoints in, Makefile build state out."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence

from nofile.config.schema import BuildConfig
from nofile.graph.dependency_graph import DependencyGraph
from nofile.makefile.synthesizer import Makefile
from nofile.parsers.include_parser import extract_local_includes
from nofile.runtime.diagnostics import DiagnosticSink, RichDiagnostics, invalid_include
from nofile.runtime.traversal import SourceReader, TraversalEngine, read_source
from nofile.utils.path_utils import (
    SOURCE_EXTENSION,
    DependencyIdentity,
    PathKey,
)

logger = logging.getLogger("nofile.runtime.driver")


@dataclass(frozen=True)
class Entrypoint:
    """A top-level ``.c`` file and its already-read contents."""

    path: str
    contents: str


def run(
    entrypoints: Sequence[Entrypoint],
    config: Optional[BuildConfig] = None,
    diagnostics: Optional[DiagnosticSink] = None,
    reader: SourceReader = read_source,
) -> Makefile:
    """Discover the dependencies of every entrypoint.

    The graph is seeded with one empty set per entrypoint, every
    entrypoint is then processed as an independent unit, and the graph is
    frozen once all of them have joined.

    Args:
        entrypoints: Entry files, validated and read by the caller.
        config: Build configuration; defaults to ``BuildConfig.default()``.
        diagnostics: Sink for non-fatal diagnostics.
        reader: File reader used by the traversal engine.

    Returns:
        Makefile: Build state owning the frozen graph, ready to format.
    """
    config = config or BuildConfig.default()
    diagnostics = diagnostics or RichDiagnostics()
    start_time = time.time()

    source_files: List[DependencyIdentity] = [
        DependencyIdentity(entry.path) for entry in entrypoints
    ]

    graph = DependencyGraph()
    with ThreadPoolExecutor(
        max_workers=config.workers, thread_name_prefix="nofile-seed"
    ) as pool:
        list(pool.map(graph.seed_one, source_files))

    makefile = Makefile(
        compiler=config.compiler,
        flags=set(config.extra_flags),
        source_files=source_files,
        dependencies=graph,
        cflags=config.cflags,
    )

    with TraversalEngine(
        graph, diagnostics, max_workers=config.workers, reader=reader
    ) as engine:
        units = [
            engine.spawn(_run_one_file, engine, entry) for entry in entrypoints
        ]
        engine.join(units)

    graph.freeze()
    logger.info(
        "Resolved dependencies of %d entrypoint(s) in %.2fs",
        len(source_files),
        time.time() - start_time,
    )
    return makefile


def _run_one_file(engine: TraversalEngine, entry: Entrypoint) -> None:
    """Follow the includes written directly in one entrypoint."""
    start = PathKey.parse(entry.path)

    for include in extract_local_includes(entry.contents):
        header = start.compose(PathKey.parse(include))
        if not header.has_known_extension:
            engine.diagnostics.report(
                invalid_include(header.combined(), origin=entry.path)
            )
            continue

        source = header.with_extension(SOURCE_EXTENSION)
        # The .c variant goes first so it is registered before the
        # header's own includes are explored
        engine.traverse(entry.path, source)
        if header.is_header:
            engine.traverse(entry.path, header)
        else:
            engine.graph.add_dependency(entry.path, source.combined())


__all__ = ["Entrypoint", "run"]
