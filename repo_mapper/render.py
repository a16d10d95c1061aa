"""Human-readable repository map."""

from __future__ import annotations

from repo_mapper.analysis.analyzer import AnalysisResult
from repo_mapper.errors import NotFound
from repo_mapper.models import AnalyzerConfig, Component, ComponentKind, Visibility

_KIND_TAGS = {
    ComponentKind.FUNCTION: "fn",
    ComponentKind.METHOD: "fn",
    ComponentKind.TYPE: "type",
    ComponentKind.MODULE: "mod",
    ComponentKind.INTERFACE: "iface",
}


def render_repository_map(
    result: AnalysisResult,
    *,
    repository: str | None = None,
    focus: str | None = None,
    show_order: bool = False,
    show_dependencies: bool = False,
    config: AnalyzerConfig | None = None,
) -> str:
    """Render an analysis result as plain text.

    Long listings (processing order, edges) show the first
    ``config.order_preview`` / ``config.edge_preview`` entries followed by
    an ``... and N more`` line.
    """
    config = config or AnalyzerConfig()
    graph = result.graph
    insights = result.insights
    lines: list[str] = ["Repository Map", "==============", ""]

    if repository:
        lines.append(f"Path: {repository}")
    lines.append(
        f"{insights.total_components} components, "
        f"{len(insights.entry_points)} entry points, "
        f"{len(result.cycles)} cycles"
    )
    if result.unresolved_references:
        lines.append(f"{len(result.unresolved_references)} unresolved reference(s) dropped")
    if result.rejected_symbols:
        lines.append(f"{len(result.rejected_symbols)} symbol(s) rejected for invalid line ranges")
    lines.append("")

    if focus:
        lines.extend(_render_focus(result, focus))

    # ── Structure, grouped by file ──
    by_file: dict[str, list[Component]] = {}
    for component_id in graph.store.ids():
        component = graph.store[component_id]
        by_file.setdefault(component.file_path, []).append(component)

    lines.append("Structure:")
    for file_path in sorted(by_file):
        lines.append(f"  {file_path}")
        for component in sorted(by_file[file_path], key=lambda c: (c.start_line, c.name)):
            lines.append(f"    {_describe(component)}")
    lines.append("")

    if insights.entry_points:
        lines.append("Entry Points:")
        for component_id in insights.entry_points:
            component = graph.store[component_id]
            lines.append(f"  {component.name} ({component.file_path})")
        lines.append("")

    if insights.most_connected_components:
        lines.append("Key Components:")
        shown = insights.most_connected_components[:config.key_components_shown]
        for i, component_id in enumerate(shown, 1):
            component = graph.store[component_id]
            lines.append(f"  {i}. {component.name} ({component.file_path})")
        lines.append("")

    if result.cycles:
        lines.append("Cycles:")
        for members in result.cycles:
            names = [graph.store[m].name for m in members]
            lines.append(f"  {' -> '.join(names + names[:1])}")
        lines.append("")

    if show_order:
        lines.append("Processing Order (dependencies first):")
        order = result.topological_order
        for i, component_id in enumerate(order[:config.order_preview], 1):
            lines.append(f"  {i}. {graph.store[component_id].name}")
        lines.extend(_more_line(len(order), config.order_preview))
        if result.cycles_present:
            cyclic = sorted(m for members in result.cycles for m in members)
            names = ", ".join(graph.store[m].name for m in cyclic)
            lines.append(f"  Cyclic components ordered last by id: {names}")
        lines.append("")

    if show_dependencies and graph.edges:
        lines.append("Dependencies:")
        for edge in graph.edges[:config.edge_preview]:
            source = graph.store[edge.source_id]
            target = graph.store[edge.target_id]
            lines.append(f"  {source.name} → {target.name} [{edge.edge_type.value}]")
        lines.extend(_more_line(len(graph.edges), config.edge_preview))
        lines.append("")

    return "\n".join(lines)


def _describe(component: Component) -> str:
    visibility = "pub " if component.visibility == Visibility.PUBLIC else ""
    tag = _KIND_TAGS[component.kind]
    return (
        f"{visibility}{tag} {component.name} "
        f"({len(component.dependencies)}→{len(component.dependents)})"
    )


def _more_line(total: int, shown: int) -> list[str]:
    if total > shown:
        return [f"  ... and {total - shown} more"]
    return []


def _render_focus(result: AnalysisResult, focus: str) -> list[str]:
    component = result.find_component(focus)
    if isinstance(component, NotFound):
        return [f"Component '{focus}' not found", ""]

    store = result.graph.store
    lines = [
        f"Focus: {component.name}",
        f"   Type: {component.kind.value} | Visibility: {component.visibility.value}",
        f"   File: {component.file_path}",
        f"   Dependencies: {len(component.dependencies)} | Used by: {len(component.dependents)}",
        "",
    ]
    if component.dependencies:
        lines.append("Depends on:")
        for component_id in component.dependencies:
            dep = store[component_id]
            lines.append(f"  → {dep.name} ({dep.file_path})")
        lines.append("")
    if component.dependents:
        lines.append("Used by:")
        for component_id in component.dependents:
            dep = store[component_id]
            lines.append(f"  ← {dep.name} ({dep.file_path})")
        lines.append("")
    return lines
