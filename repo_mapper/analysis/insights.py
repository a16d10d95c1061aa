"""Repository insights — entry points, connectivity ranking, hotspots and layers."""

from __future__ import annotations

import logging
from pathlib import PurePosixPath

from repo_mapper.analysis.graph_models import ArchitecturalLayer, DependencyGraph, Insights
from repo_mapper.models import AnalyzerConfig

logger = logging.getLogger(__name__)

ROOT_LAYER = "root"


def generate_insights(graph: DependencyGraph, config: AnalyzerConfig | None = None) -> Insights:
    """Derive summary statistics from a finished graph.

    Every field is a pure function of the graph; equal graphs give equal
    insights.
    """
    config = config or AnalyzerConfig()
    logger.debug("Generating repository insights")

    files = {component.file_path for component in graph.store}
    return Insights(
        total_files=len(files),
        total_components=len(graph.store),
        total_edges=len(graph.edges),
        entry_points=tuple(find_entry_points(graph)),
        most_connected_components=tuple(
            rank_most_connected(graph, config.most_connected_limit)
        ),
        dependency_hotspots=tuple(rank_hotspots(graph, config.hotspot_limit)),
        most_complex_files=tuple(rank_complex_files(graph, config.complex_files_limit)),
        architectural_layers=tuple(group_layers(graph)),
    )


def find_entry_points(graph: DependencyGraph) -> list[str]:
    """Components that depend on nothing, ascending by id."""
    return sorted(c.id for c in graph.store if not c.dependencies)


def rank_most_connected(graph: DependencyGraph, limit: int = 10) -> list[str]:
    """Rank by dependencies + dependents, most first, ties by id.

    Components with no connections at all are left out.
    """
    scored = [
        (len(c.dependencies) + len(c.dependents), c.id)
        for c in graph.store
    ]
    scored = [entry for entry in scored if entry[0] > 0]
    scored.sort(key=lambda x: (-x[0], x[1]))
    return [component_id for _, component_id in scored[:limit]]


def rank_hotspots(graph: DependencyGraph, limit: int = 10) -> list[str]:
    """Components many others lean on, weighted toward complex ones."""
    scored = [
        (len(c.dependents), c.complexity_score or 0, c.id)
        for c in graph.store
        if c.dependents
    ]
    scored.sort(key=lambda x: (-x[0], -x[1], x[2]))
    return [component_id for _, _, component_id in scored[:limit]]


def rank_complex_files(graph: DependencyGraph, limit: int = 10) -> list[str]:
    """Files ranked by the summed complexity of their components."""
    totals: dict[str, int] = {}
    for c in graph.store:
        totals[c.file_path] = totals.get(c.file_path, 0) + (c.complexity_score or 0)

    ranked = sorted(
        ((score, path) for path, score in totals.items() if score > 0),
        key=lambda x: (-x[0], x[1]),
    )
    return [path for _, path in ranked[:limit]]


def layer_of(file_path: str) -> str:
    parts = PurePosixPath(file_path).parts
    if parts and parts[0] == "/":
        parts = parts[1:]
    return parts[0] if len(parts) > 1 else ROOT_LAYER


def group_layers(graph: DependencyGraph) -> list[ArchitecturalLayer]:
    """Group components by top-level directory."""
    files: dict[str, set[str]] = {}
    counts: dict[str, int] = {}
    component_layer: dict[str, str] = {}

    for c in graph.store:
        layer = layer_of(c.file_path)
        files.setdefault(layer, set()).add(c.file_path)
        counts[layer] = counts.get(layer, 0) + 1
        component_layer[c.id] = layer

    outgoing: dict[str, int] = {}
    for edge in graph.edges:
        src_layer = component_layer[edge.source_id]
        if src_layer != component_layer[edge.target_id]:
            outgoing[src_layer] = outgoing.get(src_layer, 0) + 1

    layers = []
    for name in sorted(files):
        description = (
            f"{counts[name]} component(s) in {len(files[name])} file(s), "
            f"{outgoing.get(name, 0)} outgoing cross-layer edge(s)"
        )
        layers.append(ArchitecturalLayer(
            name=name,
            files=tuple(sorted(files[name])),
            description=description,
        ))
    return layers
