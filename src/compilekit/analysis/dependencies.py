# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Source dependency extraction and graph analysis."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable, Iterator, Mapping, Sequence
from pathlib import Path, PurePosixPath
from typing import Final

from ..core.logging import DebugLogger
from ..core.models import DependencyGraph, Language
from .models import DependencyAnalysis, DependencyComplexity, DependencyHealth

DEPENDENCY_PATTERNS: Final[dict[Language, tuple[re.Pattern[str], ...]]] = {
    Language.JAVA: (
        re.compile(r"^\s*import\s+(?:static\s+)?([\w.]+)\s*;", re.MULTILINE),
        re.compile(r"\bextends\s+([\w.]+)"),
        re.compile(r"\bimplements\s+([\w.,\s]+?)\s*\{"),
    ),
    Language.JAVASCRIPT: (
        re.compile(r"require\(\s*['\"]([^'\"]+)['\"]\s*\)"),
        re.compile(r"\bimport\s[^'\"]*?\bfrom\s+['\"]([^'\"]+)['\"]"),
        re.compile(r"^\s*import\s+['\"]([^'\"]+)['\"]", re.MULTILINE),
    ),
    Language.PYTHON: (
        re.compile(r"^\s*import\s+([\w.]+(?:\s*,\s*[\w.]+)*)", re.MULTILINE),
        re.compile(r"^\s*from\s+([\w.]+)\s+import\b", re.MULTILINE),
    ),
    Language.CPP: (
        re.compile(r"#\s*include\s*[<\"]([^>\"]+)[>\"]"),
        re.compile(r"\busing\s+namespace\s+(\w+)"),
        re.compile(r"\bclass\s+\w+\s*:\s*public\s+(\w+)"),
    ),
    Language.C: (re.compile(r"#\s*include\s*[<\"]([^>\"]+)[>\"]"),),
    Language.RUST: (
        re.compile(r"^\s*(?:pub\s+)?use\s+([^;]+);", re.MULTILINE),
        re.compile(r"\bextern\s+crate\s+(\w+)"),
        re.compile(r"^\s*(?:pub\s+)?mod\s+(\w+)\s*;", re.MULTILINE),
    ),
    Language.GO: (
        re.compile(r"\bimport\s+(?:\w+\s+)?\"([^\"]+)\""),
        re.compile(r"\bimport\s*\(([^)]*)\)", re.DOTALL),
    ),
}

_GO_IMPORT_BLOCK_ENTRY: Final[re.Pattern[str]] = re.compile(r"\"([^\"]+)\"")
_NAME_SEPARATORS: Final[re.Pattern[str]] = re.compile(r"::|[./\\]")


def _split_names(raw: str, language: Language) -> list[str]:
    if language is Language.GO and '"' in raw:
        return _GO_IMPORT_BLOCK_ENTRY.findall(raw)
    if language is Language.RUST:
        return [raw.strip()]
    return [part.strip() for part in raw.split(",") if part.strip()]


def extract_dependencies(content: str, language: Language) -> set[str]:
    """Return the dependency names referenced by ``content``."""

    names: set[str] = set()
    for pattern in DEPENDENCY_PATTERNS.get(language, ()):
        for match in pattern.finditer(content):
            names.update(_split_names(match.group(1), language))
    return names


class _SourceIndex:
    """Map dependency names onto the task's own source files."""

    def __init__(self, sources: Sequence[str]) -> None:
        self._by_path: dict[str, str] = {}
        self._by_name: dict[str, str] = {}
        self._by_stem: dict[str, str] = {}
        for source in sources:
            posix = PurePosixPath(Path(source).as_posix())
            self._by_path.setdefault(str(posix), source)
            self._by_name.setdefault(posix.name, source)
            self._by_stem.setdefault(posix.stem, source)

    def resolve(self, name: str) -> str:
        """Return the source file ``name`` refers to, or ``name`` itself."""

        candidate = name.strip()
        posix = PurePosixPath(candidate.lstrip("./"))
        if str(posix) in self._by_path:
            return self._by_path[str(posix)]
        if posix.name in self._by_name:
            return self._by_name[posix.name]
        segments = [segment for segment in _NAME_SEPARATORS.split(candidate) if segment and segment != "*"]
        for segment in reversed(segments):
            if segment in self._by_stem:
                return self._by_stem[segment]
            if segment in {"crate", "self", "super"}:
                break
        return candidate


def build_graph(
    source_files: Sequence[str],
    language: Language,
    *,
    root: Path | None = None,
    debug_logger: DebugLogger | None = None,
) -> DependencyGraph:
    """Read ``source_files`` and build their dependency graph.

    Dependencies that name another file of the same task are resolved to that
    file so that cycles between sources become visible. Unreadable files become
    nodes without outgoing edges.

    Args:
        source_files: Paths as they appear on the task, relative to ``root``.
        language: Language whose import syntax should be recognised.
        root: Directory relative paths are resolved against.
        debug_logger: Optional callable receiving trace messages.

    Returns:
        DependencyGraph: Nodes are the source files; edges point at dependencies.
    """

    index = _SourceIndex(source_files)
    edges: set[tuple[str, str]] = set()
    for source in source_files:
        path = Path(source)
        if root is not None and not path.is_absolute():
            path = root / path
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            if debug_logger is not None:
                debug_logger(f"skipping dependencies of {source}: {exc}")
            continue
        for name in extract_dependencies(content, language):
            target = index.resolve(name)
            if target != source:
                edges.add((source, target))
    return DependencyGraph(nodes=frozenset(source_files), edges=frozenset(edges))


def _adjacency(graph: DependencyGraph) -> dict[str, list[str]]:
    adjacency: dict[str, list[str]] = {}
    for source, target in sorted(graph.edges):
        adjacency.setdefault(source, []).append(target)
    return adjacency


def detect_cycles(graph: DependencyGraph) -> list[list[str]]:
    """Return every cycle found by a depth-first traversal.

    Each cycle is reported as the ordered path from its first node back to
    that node, e.g. ``["a", "b", "c", "a"]``. Nodes are visited in sorted order
    so the output is deterministic.
    """

    adjacency = _adjacency(graph)
    visited: set[str] = set()
    on_stack: set[str] = set()
    cycles: list[list[str]] = []

    for start in sorted(graph.nodes | set(adjacency)):
        if start in visited:
            continue
        path: list[str] = [start]
        visited.add(start)
        on_stack.add(start)
        stack: list[tuple[str, Iterator[str]]] = [(start, iter(adjacency.get(start, ())))]
        while stack:
            node, neighbours = stack[-1]
            advanced = False
            for neighbour in neighbours:
                if neighbour in on_stack:
                    cycles.append([*path[path.index(neighbour) :], neighbour])
                elif neighbour not in visited:
                    visited.add(neighbour)
                    on_stack.add(neighbour)
                    path.append(neighbour)
                    stack.append((neighbour, iter(adjacency.get(neighbour, ()))))
                    advanced = True
                    break
            if not advanced:
                stack.pop()
                on_stack.discard(node)
                path.pop()
    return cycles


def critical_dependencies(graph: DependencyGraph) -> list[str]:
    """Return dependencies used by more than a third of all nodes, most used first."""

    threshold = len(graph.nodes) // 3
    counts = Counter(target for _, target in graph.edges)
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [name for name, count in ranked if count > threshold]


def complexity_for(graph: DependencyGraph) -> DependencyComplexity:
    """Classify ``graph`` by edge density ``edges / (n * (n - 1))``."""

    node_count = len(graph.nodes)
    possible = node_count * (node_count - 1)
    density = len(graph.edges) / possible if possible > 0 else 0.0
    if density < 0.1:
        return DependencyComplexity.SIMPLE
    if density < 0.3:
        return DependencyComplexity.MODERATE
    if density < 0.6:
        return DependencyComplexity.COMPLEX
    return DependencyComplexity.VERY_COMPLEX


def health_for(graph: DependencyGraph, cycles: Sequence[Sequence[str]]) -> DependencyHealth:
    """Classify dependency health by cycle count relative to node count."""

    cycle_count = len(cycles)
    node_count = len(graph.nodes)
    if cycle_count == 0:
        return DependencyHealth.EXCELLENT
    if cycle_count <= node_count * 0.1:
        return DependencyHealth.GOOD
    if cycle_count <= node_count * 0.3:
        return DependencyHealth.FAIR
    if cycle_count <= node_count * 0.5:
        return DependencyHealth.POOR
    return DependencyHealth.VERY_POOR


def analyze_graph(graph: DependencyGraph) -> DependencyAnalysis:
    """Return cycle, hot-spot, complexity and health findings for ``graph``."""

    cycles = detect_cycles(graph)
    return DependencyAnalysis(
        dependency_graph=graph,
        circular_dependencies=tuple(tuple(cycle) for cycle in cycles),
        critical_dependencies=tuple(critical_dependencies(graph)),
        complexity=complexity_for(graph),
        dependency_health=health_for(graph, cycles),
    )


def analyze_dependencies(
    source_files: Sequence[str],
    language: Language,
    *,
    root: Path | None = None,
    debug_logger: DebugLogger | None = None,
) -> DependencyAnalysis:
    """Build the dependency graph for ``source_files`` and analyse it."""

    return analyze_graph(build_graph(source_files, language, root=root, debug_logger=debug_logger))


def graph_from_mapping(mapping: Mapping[str, Iterable[str]]) -> DependencyGraph:
    """Return a graph from ``{node: dependencies}``; handy for synthetic graphs."""

    edges = {(source, target) for source, targets in mapping.items() for target in targets}
    return DependencyGraph(nodes=frozenset(mapping), edges=frozenset(edges))


__all__ = [
    "DEPENDENCY_PATTERNS",
    "analyze_dependencies",
    "analyze_graph",
    "build_graph",
    "complexity_for",
    "critical_dependencies",
    "detect_cycles",
    "extract_dependencies",
    "graph_from_mapping",
    "health_for",
]
