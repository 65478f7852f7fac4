"""Concurrency-safe entrypoint -> dependency-set mapping.

DependencyGraph is shared by every traversal thread of a run. Keys and
members are ``DependencyIdentity`` values, so membership is decided by
file name alone: ``lib/util.c`` and ``util.c`` are the same dependency.
"""

import logging
import threading
from typing import Dict, Iterable, List, Optional, Set, Tuple, Union

from nofile.errors import GraphFrozenError, UnknownEntrypointError
from nofile.utils.path_utils import DependencyIdentity

logger = logging.getLogger("nofile.graph.dependency_graph")

IdentityLike = Union[str, DependencyIdentity]


def _identity(value: IdentityLike) -> DependencyIdentity:
    if isinstance(value, DependencyIdentity):
        return value
    return DependencyIdentity(value)


class _Entry:
    """One entrypoint's dependency set and the lock guarding it."""

    __slots__ = ("key", "lock", "members")

    def __init__(self, key: DependencyIdentity) -> None:
        self.key = key
        self.lock = threading.Lock()
        self.members: Dict[DependencyIdentity, DependencyIdentity] = {}


class DependencyGraph:
    """Map from entrypoint identity to the set of its dependencies.

    Lifecycle: seeded with one empty set per entrypoint, appended to by
    traversals, frozen once they have all joined, then drained by the
    Makefile synthesizer. Entries are never removed before the drain.

    Locking: a structure lock protects the key table (seeding and
    lookups), and every entrypoint has its own lock for inserts and
    membership checks. Inserts for different entrypoints therefore only
    share the brief table lookup, while operations on one entrypoint are
    serialised.
    """

    def __init__(self) -> None:
        self._entries: Dict[DependencyIdentity, _Entry] = {}
        self._lock = threading.RLock()
        self._frozen = False
        self._drained = False

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    def seed_one(self, entrypoint: IdentityLike) -> None:
        """Insert an empty dependency set for ``entrypoint`` if absent."""
        key = _identity(entrypoint)
        with self._lock:
            self._check_mutable()
            if key not in self._entries:
                self._entries[key] = _Entry(key)

    def seed(self, entrypoints: Iterable[IdentityLike]) -> None:
        """Insert an empty dependency set for each entrypoint."""
        for entrypoint in entrypoints:
            self.seed_one(entrypoint)

    # ------------------------------------------------------------------
    # Traversal-time operations
    # ------------------------------------------------------------------

    def add_dependency(self, entrypoint: IdentityLike, dependency: str) -> bool:
        """Record ``dependency`` for ``entrypoint``.

        Unknown entrypoints are ignored. The first path recorded under a
        given file name is the one kept.

        Returns:
            bool: True if the dependency was newly added.
        """
        entry = self._lookup(entrypoint)
        if entry is None:
            logger.debug("Ignoring dependency %s of unknown entrypoint %s", dependency, entrypoint)
            return False

        member = DependencyIdentity(dependency)
        with entry.lock:
            # Checked under the entry lock so freeze() cannot interleave
            if self._frozen:
                raise GraphFrozenError(
                    f"Cannot add {dependency} to {entry.key}: graph is frozen"
                )
            if member in entry.members:
                return False
            entry.members[member] = member

        logger.debug("Registered %s as a dependency of %s", dependency, entry.key)
        return True

    def has_dependency(self, entrypoint: IdentityLike, dependency: str) -> bool:
        """Return True if a dependency with the same file name is recorded."""
        entry = self._lookup(entrypoint)
        if entry is None:
            return False
        with entry.lock:
            return DependencyIdentity(dependency) in entry.members

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def dependencies_for(self, entrypoint: IdentityLike) -> Set[str]:
        """Return the recorded dependency paths of ``entrypoint``.

        Raises:
            UnknownEntrypointError: If ``entrypoint`` was never seeded.
        """
        entry = self._lookup(entrypoint)
        if entry is None:
            raise UnknownEntrypointError(str(entrypoint))
        with entry.lock:
            return {member.path for member in entry.members}

    def entrypoints(self) -> List[DependencyIdentity]:
        """Return the seeded entrypoint identities."""
        with self._lock:
            return list(self._entries)

    def snapshot(self) -> Dict[str, List[str]]:
        """Return a plain ``{entrypoint: sorted dependency paths}`` copy."""
        with self._lock:
            entries = list(self._entries.values())
        result: Dict[str, List[str]] = {}
        for entry in entries:
            with entry.lock:
                result[entry.key.path] = sorted(m.path for m in entry.members)
        return result

    def __contains__(self, entrypoint: object) -> bool:
        if not isinstance(entrypoint, (str, DependencyIdentity)):
            return False
        return self._lookup(entrypoint) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # ------------------------------------------------------------------
    # Hand-off to synthesis
    # ------------------------------------------------------------------

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Reject further mutation. Call once every traversal has joined."""
        with self._lock:
            entries = list(self._entries.values())
            for entry in entries:
                entry.lock.acquire()
            try:
                self._frozen = True
            finally:
                for entry in entries:
                    entry.lock.release()
        logger.debug("Dependency graph frozen with %d entrypoints", len(entries))

    def drain(self) -> List[Tuple[DependencyIdentity, Set[str]]]:
        """Empty the graph, returning every entry with its dependency paths.

        The graph is frozen first, and cannot be drained twice.

        Raises:
            GraphFrozenError: If the graph was already drained.
        """
        self.freeze()
        with self._lock:
            if self._drained:
                raise GraphFrozenError("Dependency graph was already drained")
            entries = list(self._entries.values())
            self._entries.clear()
            self._drained = True
        return [(entry.key, {m.path for m in entry.members}) for entry in entries]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _lookup(self, entrypoint: IdentityLike) -> Optional[_Entry]:
        key = _identity(entrypoint)
        with self._lock:
            return self._entries.get(key)

    def _check_mutable(self) -> None:
        if self._frozen:
            raise GraphFrozenError("Dependency graph is frozen")


__all__ = ["DependencyGraph"]
