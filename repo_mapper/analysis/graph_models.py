"""Data models for the dependency graph and the products derived from it."""

from __future__ import annotations

from dataclasses import dataclass, field

from repo_mapper.analysis.symbol_store import SymbolStore
from repo_mapper.errors import RepoMapError, UnknownComponentError
from repo_mapper.models import Component, DependencyEdge, EdgeType


@dataclass
class DependencyGraph:
    store: SymbolStore = field(default_factory=SymbolStore)
    edges: list[DependencyEdge] = field(default_factory=list)
    cycles: list[list[str]] = field(default_factory=list)

    def add_edge(
        self,
        source_id: str,
        target_id: str,
        edge_type: EdgeType = EdgeType.CALL,
    ) -> DependencyEdge:
        if self.store.sealed:
            raise RepoMapError("Graph is sealed; start a new analysis instead")
        source = self.store.get(source_id)
        if source is None:
            raise UnknownComponentError(source_id)
        target = self.store.get(target_id)
        if target is None:
            raise UnknownComponentError(target_id)

        edge = DependencyEdge(source_id, target_id, edge_type)
        self.edges.append(edge)

        # Parallel edges count in the edge list, but adjacency is a set
        if target_id not in source.dependencies:
            source.dependencies.append(target_id)
        if source_id not in target.dependents:
            target.dependents.append(source_id)
        return edge

    @property
    def components(self) -> SymbolStore:
        return self.store

    def component(self, component_id: str) -> Component | None:
        return self.store.get(component_id)

    def has_self_edge(self, component_id: str) -> bool:
        component = self.store.get(component_id)
        return component is not None and component_id in component.dependencies


@dataclass(frozen=True)
class ProcessingOrder:
    order: tuple[str, ...] = ()
    cycles_present: bool = False

    def __len__(self) -> int:
        return len(self.order)

    def __iter__(self):
        return iter(self.order)


@dataclass(frozen=True)
class ArchitecturalLayer:
    name: str
    files: tuple[str, ...] = ()
    description: str = ""


@dataclass(frozen=True)
class Insights:
    total_files: int = 0
    total_components: int = 0
    total_edges: int = 0
    entry_points: tuple[str, ...] = ()
    most_connected_components: tuple[str, ...] = ()
    dependency_hotspots: tuple[str, ...] = ()
    most_complex_files: tuple[str, ...] = ()
    architectural_layers: tuple[ArchitecturalLayer, ...] = ()
