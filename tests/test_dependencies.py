# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for dependency extraction and graph analysis."""

from __future__ import annotations

from pathlib import Path

from compilekit.analysis.dependencies import (
    analyze_dependencies,
    analyze_graph,
    build_graph,
    detect_cycles,
    extract_dependencies,
    graph_from_mapping,
)
from compilekit.analysis.models import DependencyComplexity, DependencyHealth
from compilekit.core.models import Language


def test_three_node_cycle_is_reported_once() -> None:
    graph = graph_from_mapping({"A": ["B"], "B": ["C"], "C": ["A"]})

    analysis = analyze_graph(graph)

    assert detect_cycles(graph) == [["A", "B", "C", "A"]]
    assert analysis.circular_dependencies == (("A", "B", "C", "A"),)
    assert analysis.complexity is DependencyComplexity.COMPLEX
    assert analysis.dependency_health is DependencyHealth.POOR


def test_acyclic_graph_is_healthy() -> None:
    graph = graph_from_mapping({"a": ["x"], "b": ["x"], "c": ["x"], "x": []})

    analysis = analyze_graph(graph)

    assert analysis.circular_dependencies == ()
    assert analysis.critical_dependencies == ("x",)
    assert analysis.complexity is DependencyComplexity.MODERATE
    assert analysis.dependency_health is DependencyHealth.EXCELLENT


def test_empty_graph() -> None:
    analysis = analyze_graph(graph_from_mapping({}))

    assert analysis.circular_dependencies == ()
    assert analysis.critical_dependencies == ()
    assert analysis.complexity is DependencyComplexity.SIMPLE


def test_python_sources_on_disk_form_a_cycle(tmp_path: Path) -> None:
    (tmp_path / "a.py").write_text("import os\nimport b\n", encoding="utf-8")
    (tmp_path / "b.py").write_text("from c import thing\n", encoding="utf-8")
    (tmp_path / "c.py").write_text("import a\n", encoding="utf-8")

    analysis = analyze_dependencies(["a.py", "b.py", "c.py"], Language.PYTHON, root=tmp_path)

    graph = analysis.dependency_graph
    assert graph.neighbours("a.py") == ["b.py", "os"]
    assert graph.neighbours("c.py") == ["a.py"]
    assert analysis.circular_dependencies == (("a.py", "b.py", "c.py", "a.py"),)


def test_c_includes_resolve_to_task_headers(tmp_path: Path) -> None:
    (tmp_path / "main.c").write_text('#include <stdio.h>\n#include "util.h"\n', encoding="utf-8")
    (tmp_path / "util.h").write_text("int helper(void);\n", encoding="utf-8")

    graph = build_graph(["main.c", "util.h"], Language.C, root=tmp_path)

    assert graph.nodes == frozenset({"main.c", "util.h"})
    assert graph.neighbours("main.c") == ["stdio.h", "util.h"]
    assert graph.neighbours("util.h") == []


def test_unreadable_sources_become_isolated_nodes(tmp_path: Path) -> None:
    traces: list[str] = []

    graph = build_graph(["missing.py"], Language.PYTHON, root=tmp_path, debug_logger=traces.append)

    assert graph.nodes == frozenset({"missing.py"})
    assert graph.edges == frozenset()
    assert traces


def test_java_extraction() -> None:
    content = (
        "import java.util.List;\n"
        "import static org.junit.Assert.assertTrue;\n"
        "public class Main extends Base implements Runnable, Serializable {\n}\n"
    )

    assert extract_dependencies(content, Language.JAVA) == {
        "java.util.List",
        "org.junit.Assert.assertTrue",
        "Base",
        "Runnable",
        "Serializable",
    }


def test_rust_extraction() -> None:
    content = "use std::collections::HashMap;\npub mod parser;\nextern crate serde;\n"

    assert extract_dependencies(content, Language.RUST) == {"std::collections::HashMap", "parser", "serde"}


def test_go_import_block_extraction() -> None:
    content = 'package main\n\nimport "strings"\n\nimport (\n\t"fmt"\n\tstdos "os"\n)\n'

    assert extract_dependencies(content, Language.GO) == {"strings", "fmt", "os"}


def test_javascript_extraction() -> None:
    content = (
        "const _ = require('lodash');\n"
        "import { helper } from './util';\n"
        "import './styles.css';\n"
    )

    assert extract_dependencies(content, Language.JAVASCRIPT) == {"lodash", "./util", "./styles.css"}


def test_python_multi_import() -> None:
    assert extract_dependencies("import os, sys\nfrom pkg.mod import x\n", Language.PYTHON) == {
        "os",
        "sys",
        "pkg.mod",
    }
