r"""Makefile synthesis from a finished dependency graph.

Layout of the generated file, in order::

    CC = gcc
    CFLAGS = -Wall -g -pedantic -std=c99

    MAIN_SOURCE = util.c list.c
    ...

    .SUFFIXES: .c .o

    .PHONY: all clean

    all: main ...

    main: main.o
    \t$(CC) $(CFLAGS) main.c $(MAIN_SOURCE) -o $@

    clean:
    \trm -f $(wildcard *.o)
    \trm -f main
    \trm -f main.o
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Set

from nofile.errors import ExtensionContractError
from nofile.graph.dependency_graph import DependencyGraph
from nofile.utils.path_utils import DependencyIdentity, has_c_family_extension

logger = logging.getLogger("nofile.makefile.synthesizer")

CC_IDENTIFIER = "CC"
CFLAGS_IDENTIFIER = "CFLAGS"
DEFAULT_COMPILER = "gcc"
DEFAULT_CFLAGS = "-Wall -g -pedantic -std=c99"
SUFFIXES = ".SUFFIXES: .c .o"
CLEAN_PHONY = ".PHONY: all clean"
CLEAN_O = "\trm -f $(wildcard *.o)"


def strip_ending(file: str) -> str:
    """Drop the ``.c``/``.h`` ending of ``file``.

    Raises:
        ExtensionContractError: If ``file`` has no such ending.
    """
    if not has_c_family_extension(file):
        raise ExtensionContractError(file)
    return file[:-2]


@dataclass(frozen=True)
class ExecutableDescriptor:
    """Makefile fragments for one executable.

    Example for ``emulate.c``: label ``emulate``, variable
    ``EMULATE_SOURCE``, recipe
    ``emulate: emulate.o\\n\\t$(CC) $(CFLAGS) emulate.c $(EMULATE_SOURCE) -o $@``.
    """

    source_file: str
    label: str
    dependency_variable: str
    source: str
    recipe: str
    clean_statement: str
    clean_target: str

    @classmethod
    def from_entrypoint(
        cls, source_file: str, dependencies: Iterable[str]
    ) -> "ExecutableDescriptor":
        """Build the descriptor of ``source_file`` linked with ``dependencies``.

        Dependencies are listed in sorted order, each followed by a space.
        """
        label = strip_ending(source_file)
        variable = f"{label}_SOURCE".upper()

        recipe = (
            f"{label}: {label}.o\n"
            f"\t$({CC_IDENTIFIER}) $({CFLAGS_IDENTIFIER}) {source_file} "
            f"$({variable}) -o $@"
        )
        source = f"{variable} = " + "".join(f"{dep} " for dep in sorted(dependencies))

        return cls(
            source_file=source_file,
            label=label,
            dependency_variable=variable,
            source=source,
            recipe=recipe,
            clean_statement=f"\trm -f {label}",
            clean_target=f"\trm -f {label}.o",
        )


def render_makefile(
    compiler: str,
    cflags: str,
    executables: List[ExecutableDescriptor],
) -> str:
    """Assemble the Makefile text from per-executable descriptors."""
    sources = "".join(f"{data.source}\n" for data in executables) + "\n"
    all_exes = "all: " + "".join(f"{data.label} " for data in executables)
    recipes = "".join(f"{data.recipe}\n\n" for data in executables)
    clean = f"clean:\n{CLEAN_O}\n" + "".join(
        f"{data.clean_statement}\n{data.clean_target}\n" for data in executables
    )

    return (
        f"{CC_IDENTIFIER} = {compiler}\n"
        f"{CFLAGS_IDENTIFIER} = {cflags}\n\n"
        f"{sources}"
        f"{SUFFIXES}\n\n"
        f"{CLEAN_PHONY}\n\n"
        f"{all_exes}\n\n"
        f"{recipes}"
        f"{clean}"
    )


class Makefile:
    """Build state: compiler settings, entrypoints and their dependencies.

    The dependency graph is owned by this object once traversal is done;
    ``format`` drains it, so a Makefile can be formatted only once.
    """

    def __init__(
        self,
        compiler: str,
        flags: Set[str],
        source_files: List[DependencyIdentity],
        dependencies: DependencyGraph,
        cflags: str = DEFAULT_CFLAGS,
    ) -> None:
        self.compiler = compiler
        self.flags = flags
        self.cflags = cflags
        self.source_files = source_files
        self.dependencies = dependencies

    @property
    def cflags_line_value(self) -> str:
        """Base flags followed by the extra flags in sorted order."""
        return " ".join([self.cflags, *sorted(self.flags)]).strip()

    def dependencies_for(self, source: str) -> Set[str]:
        """Dependencies recorded for ``source`` (see DependencyGraph)."""
        return self.dependencies.dependencies_for(source)

    def executables(self) -> List[ExecutableDescriptor]:
        """Drain the graph into descriptors, in entrypoint order."""
        drained = dict(self.dependencies.drain())
        executables: List[ExecutableDescriptor] = []
        for source_file in self.source_files:
            deps: Optional[Set[str]] = drained.pop(source_file, None)
            if deps is None:
                # Entrypoint listed twice under the same file name
                continue
            executables.append(
                ExecutableDescriptor.from_entrypoint(source_file.path, deps)
            )
        return executables

    def format(self) -> str:
        """Render the Makefile text. Consumes the dependency graph."""
        executables = self.executables()
        logger.info("Formatting Makefile for %d executable(s)", len(executables))
        return render_makefile(self.compiler, self.cflags_line_value, executables)


__all__ = [
    "CC_IDENTIFIER",
    "CFLAGS_IDENTIFIER",
    "CLEAN_O",
    "CLEAN_PHONY",
    "DEFAULT_CFLAGS",
    "DEFAULT_COMPILER",
    "ExecutableDescriptor",
    "Makefile",
    "SUFFIXES",
    "render_makefile",
    "strip_ending",
]
