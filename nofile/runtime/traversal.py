"""Recursive, concurrent traversal of local includes.

Starting from one candidate path, the engine reads the file, records it
as a dependency of the entrypoint when it is a ``.c`` file, and follows
every local include. Each include is resolved against the directory of
the file it appears in, normalised to its ``.c`` variant, and - unless
that file name is already recorded for the entrypoint - explored as a
pair: first the ``.c`` file, then the ``.h`` file of the same name.

Sub-traversals run on a bounded thread pool. A pair is submitted only
when a worker slot is free; otherwise it is pushed on the work stack of
the level that found it, and that level drains its stack iteratively.
Include depth therefore never turns into Python call depth. Every level
joins all the units it submitted before returning, so a finished
``traverse`` call means its whole subtree is reflected in the graph.

Known limitation: dependency identity is the file name, and only ``.c``
files are recorded. Headers that include each other in a cycle with no
``.c`` counterpart on disk are never recorded, so nothing stops the
traversal for them.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

from nofile.graph.dependency_graph import DependencyGraph
from nofile.parsers.include_parser import extract_local_includes
from nofile.runtime.diagnostics import DiagnosticSink, invalid_include
from nofile.utils.path_utils import HEADER_EXTENSION, SOURCE_EXTENSION, PathKey

logger = logging.getLogger("nofile.runtime.traversal")

DEFAULT_WORKERS = 8

SourceReader = Callable[[str], Optional[str]]


def read_source(path: str) -> Optional[str]:
    """Read ``path`` as UTF-8 text, returning None if it cannot be read.

    A missing file is the normal outcome for one half of a ``.c``/``.h``
    pair, so it is logged at debug level only.
    """
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Skipping %s: %s", path, exc)
        return None


class TraversalEngine:
    """Follows local includes and fills a DependencyGraph.

    Usage:
        with TraversalEngine(graph, diagnostics, max_workers=8) as engine:
            engine.traverse("main.c", PathKey.parse("util.c"))
    """

    def __init__(
        self,
        graph: DependencyGraph,
        diagnostics: DiagnosticSink,
        max_workers: int = DEFAULT_WORKERS,
        reader: SourceReader = read_source,
    ) -> None:
        """Initialize the engine.

        Args:
            graph: Shared graph receiving discovered ``.c`` files.
            diagnostics: Sink for invalid-extension includes.
            max_workers: Upper bound on pool threads.
            reader: Function returning file text or None when unreadable.
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.graph = graph
        self.diagnostics = diagnostics
        self.max_workers = max_workers
        self._reader = reader
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="nofile-traverse"
        )
        # One slot per pool thread: a submitted unit never waits for a worker
        self._slots = threading.BoundedSemaphore(max_workers)

        logger.info("TraversalEngine started with %d workers", max_workers)

    def __enter__(self) -> "TraversalEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    def shutdown(self) -> None:
        """Stop the worker pool, waiting for running units."""
        self._executor.shutdown(wait=True)

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def spawn(self, func: Callable[..., Any], *args: Any) -> Optional[Future]:
        """Run ``func(*args)`` on the pool if a slot is free, else inline.

        Returns:
            The future of a submitted unit, or None when it already ran.
        """
        future = self.try_submit(func, *args)
        if future is None:
            func(*args)
        return future

    def try_submit(self, func: Callable[..., Any], *args: Any) -> Optional[Future]:
        """Submit ``func(*args)`` if a slot is free; return None otherwise."""
        if not self._slots.acquire(blocking=False):
            return None
        try:
            return self._executor.submit(self._run_in_slot, func, *args)
        except BaseException:
            self._slots.release()
            raise

    def _run_in_slot(self, func: Callable[..., Any], *args: Any) -> Any:
        try:
            return func(*args)
        finally:
            self._slots.release()

    @staticmethod
    def join(futures: List[Optional[Future]]) -> None:
        """Wait for every unit; the first failure is re-raised."""
        for future in futures:
            if future is not None:
                future.result()

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def traverse(self, entrypoint: str, candidate: PathKey) -> None:
        """Explore ``candidate`` and everything it includes.

        Args:
            entrypoint: Path of the entrypoint the findings belong to.
            candidate: ``.c`` or ``.h`` path to read.
        """
        self._walk(entrypoint, [candidate])

    def traverse_pair(self, entrypoint: str, source: PathKey) -> None:
        """Traverse ``source`` and then its header variant, in that order."""
        self._walk(entrypoint, [source, source.with_extension(HEADER_EXTENSION)])

    def _walk(self, entrypoint: str, candidates: List[PathKey]) -> None:
        # Stack items are (path, is_pair); a pair expands to its .c then .h
        stack: List[Tuple[PathKey, bool]] = [(c, False) for c in reversed(candidates)]
        units: List[Optional[Future]] = []

        while stack:
            candidate, is_pair = stack.pop()
            if is_pair:
                if self.graph.has_dependency(entrypoint, candidate.combined()):
                    continue
                stack.append((candidate.with_extension(HEADER_EXTENSION), False))
                stack.append((candidate, False))
                continue

            deferred: List[Tuple[PathKey, bool]] = []
            for resolved in self._visit(entrypoint, candidate):
                future = self.try_submit(self.traverse_pair, entrypoint, resolved)
                if future is None:
                    deferred.append((resolved, True))
                else:
                    units.append(future)
            # Reversed so the first include is popped first
            stack.extend(reversed(deferred))

        self.join(units)

    def _visit(self, entrypoint: str, candidate: PathKey) -> List[PathKey]:
        """Read one candidate and return the ``.c`` paths it leads to."""
        path = candidate.combined()
        contents = self._reader(path)
        if contents is None:
            return []

        if candidate.is_source:
            self.graph.add_dependency(entrypoint, path)

        found: List[PathKey] = []
        for include in extract_local_includes(contents):
            relative = PathKey.parse(include)
            if not relative.has_known_extension:
                self.diagnostics.report(
                    invalid_include(candidate.directory + include, origin=path)
                )
                continue

            resolved = candidate.compose(relative.with_extension(SOURCE_EXTENSION))
            if self.graph.has_dependency(entrypoint, resolved.combined()):
                logger.debug(
                    "%s already recorded for %s, not descending",
                    resolved.combined(),
                    entrypoint,
                )
                continue

            found.append(resolved)

        return found


__all__ = ["DEFAULT_WORKERS", "SourceReader", "TraversalEngine", "read_source"]
