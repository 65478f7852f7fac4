"""End-to-end dependency resolution over C trees written to disk."""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

import pytest

from nofile.cli.generate import load_entrypoints
from nofile.config import BuildConfig
from nofile.errors import ExtensionContractError
from nofile.makefile.synthesizer import Makefile
from nofile.runtime.diagnostics import DiagnosticKind, RecordingDiagnostics
from nofile.runtime.driver import Entrypoint, run


def _resolve(
    paths: Sequence[str], workers: int = 4
) -> Tuple[Makefile, Dict[str, List[str]], RecordingDiagnostics]:
    diagnostics = RecordingDiagnostics()
    makefile = run(
        load_entrypoints(paths),
        config=BuildConfig(workers=workers),
        diagnostics=diagnostics,
    )
    return makefile, makefile.dependencies.snapshot(), diagnostics


def test_entrypoint_without_includes_has_no_dependencies(c_project) -> None:
    """Nothing included means nothing to link."""
    c_project({"a.c": "#include <stdio.h>\nint main(void) { return 0; }\n"})

    _, snapshot, _ = _resolve(["a.c"])

    assert snapshot == {"a.c": []}


def test_header_with_only_source_on_disk(c_project) -> None:
    """Including b.h where only b.c exists links b.c."""
    c_project({"a.c": '#include "b.h"\n', "b.c": "int b;\n"})

    _, snapshot, _ = _resolve(["a.c"])

    assert snapshot == {"a.c": ["b.c"]}


def test_nested_header_reaches_deeper_source(c_project) -> None:
    """b.h pulls in c.h; only c.c exists so only c.c is linked."""
    c_project(
        {
            "a.c": '#include "b.h"\n',
            "b.h": '#include "c.h"\n',
            "c.c": "int c;\n",
        }
    )

    _, snapshot, _ = _resolve(["a.c"])

    assert snapshot == {"a.c": ["c.c"]}


def test_source_and_header_pair(c_project) -> None:
    """The .c of an included header is linked and the header is still explored."""
    c_project(
        {
            "main.c": '#include "list.h"\n',
            "list.c": '#include "list.h"\n',
            "list.h": '#include "node.h"\n',
            "node.c": '#include "node.h"\n',
            "node.h": "struct node;\n",
        }
    )

    _, snapshot, _ = _resolve(["main.c"])

    assert snapshot == {"main.c": ["list.c", "node.c"]}


def test_mutual_includes_terminate(c_project) -> None:
    """Headers including each other stop once their sources are known."""
    c_project(
        {
            "a.c": '#include "b.h"\n',
            "b.c": '#include "b.h"\n',
            "b.h": '#include "c.h"\n',
            "c.c": '#include "c.h"\n',
            "c.h": '#include "b.h"\n',
        }
    )

    _, snapshot, _ = _resolve(["a.c"])

    assert snapshot == {"a.c": ["b.c", "c.c"]}


def test_relative_resolution_from_subdirectories(c_project) -> None:
    """Includes resolve against the including file's own directory."""
    c_project(
        {
            "app/main.c": '#include "../lib/list.h"\n',
            "lib/list.c": "int l;\n",
            "lib/list.h": '#include "detail/node.h"\n',
            "lib/detail/node.c": "int n;\n",
        }
    )

    _, snapshot, _ = _resolve(["app/main.c"])

    assert snapshot == {"app/main.c": ["app/../lib/detail/node.c", "app/../lib/list.c"]}


def test_directly_included_source_is_always_registered(c_project) -> None:
    """A #include of a .c file counts even if the file is missing."""
    c_project({"a.c": '#include "generated.c"\n'})

    _, snapshot, _ = _resolve(["a.c"])

    assert snapshot == {"a.c": ["generated.c"]}


def test_invalid_entrypoint_include_is_reported(c_project) -> None:
    """An include without .c/.h in the entrypoint is skipped with a warning."""
    c_project(
        {
            "src/a.c": '#include "table.def"\n#include "b.h"\n',
            "src/b.c": "int b;\n",
        }
    )

    _, snapshot, diagnostics = _resolve(["src/a.c"])

    assert snapshot == {"src/a.c": ["src/b.c"]}
    [warning] = diagnostics.of_kind(DiagnosticKind.INVALID_INCLUDE_EXTENSION)
    assert warning.path == "src/table.def"
    assert warning.origin == "src/a.c"
    assert not diagnostics.has_fatal


def test_multiple_entrypoints_are_independent(c_project) -> None:
    """Every entrypoint gets its own set; shared sources appear in both."""
    c_project(
        {
            "assemble.c": '#include "common.h"\n#include "parser.h"\n',
            "emulate.c": '#include "common.h"\n',
            "common.c": "int c;\n",
            "parser.c": "int p;\n",
        }
    )

    _, snapshot, _ = _resolve(["assemble.c", "emulate.c"])

    assert snapshot == {
        "assemble.c": ["common.c", "parser.c"],
        "emulate.c": ["common.c"],
    }


@pytest.mark.parametrize("workers", [1, 3, 32])
def test_results_do_not_depend_on_pool_size(c_project, workers: int) -> None:
    """The dependency sets are the same however the work is scheduled."""
    files = {"main.c": "".join(f'#include "m{i}.h"\n' for i in range(12))}
    for i in range(12):
        files[f"m{i}.c"] = f'#include "m{i}.h"\n'
        files[f"m{i}.h"] = f'#include "shared{i % 3}.h"\n'
    for j in range(3):
        files[f"shared{j}.c"] = "int s;\n"
    c_project(files)

    _, snapshot, _ = _resolve(["main.c"], workers=workers)

    expected = sorted([f"m{i}.c" for i in range(12)] + [f"shared{j}.c" for j in range(3)])
    assert snapshot == {"main.c": expected}


def test_run_freezes_graph_and_keeps_entry_order(c_project) -> None:
    """The returned build state owns a frozen graph."""
    c_project({"b.c": "", "a.c": ""})

    makefile, _, _ = _resolve(["b.c", "a.c"])

    assert makefile.dependencies.frozen
    assert [s.path for s in makefile.source_files] == ["b.c", "a.c"]
    assert makefile.compiler == "gcc"


def test_run_accepts_in_memory_entrypoints() -> None:
    """Entrypoints need not come from disk; the reader is pluggable."""
    files = {"util.c": "int u;\n"}
    makefile = run(
        [Entrypoint("main.c", '#include "util.h"\n')],
        diagnostics=RecordingDiagnostics(),
        reader=files.get,
    )
    assert makefile.dependencies_for("main.c") == {"util.c"}


def test_label_strip_requires_extension() -> None:
    """Entrypoints are validated upstream; a bad one is a defect at format time."""
    makefile = run(
        [Entrypoint("main", "")], diagnostics=RecordingDiagnostics(), reader=lambda p: None
    )
    with pytest.raises(ExtensionContractError):
        makefile.format()
