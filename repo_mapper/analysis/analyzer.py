"""Repository analyzer — runs store → graph → cycles → order → insights over one input batch."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from repo_mapper.analysis.cycles import detect_cycles
from repo_mapper.analysis.dependency_graph import DependencyGraphBuilder
from repo_mapper.analysis.graph_models import DependencyGraph, Insights, ProcessingOrder
from repo_mapper.analysis.insights import generate_insights
from repo_mapper.analysis.sequencer import compute_processing_order
from repo_mapper.analysis.symbol_store import SymbolStore
from repo_mapper.errors import InvalidRange, NotFound, UnresolvedReference
from repo_mapper.models import AnalyzerConfig, Component, ReferenceFact, SymbolRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    """Finished, read-only product of one analysis run."""
    graph: DependencyGraph
    processing_order: ProcessingOrder
    insights: Insights
    unresolved_references: tuple[UnresolvedReference, ...] = ()
    rejected_symbols: tuple[InvalidRange, ...] = ()
    config: AnalyzerConfig = field(default_factory=AnalyzerConfig, compare=False)

    @property
    def cycles(self) -> list[list[str]]:
        return self.graph.cycles

    @property
    def topological_order(self) -> tuple[str, ...]:
        return self.processing_order.order

    @property
    def cycles_present(self) -> bool:
        return self.processing_order.cycles_present

    def dependencies_of(self, component_id: str) -> tuple[str, ...] | NotFound:
        component = self.graph.component(component_id)
        if component is None:
            return NotFound(component_id)
        return tuple(component.dependencies)

    def dependents_of(self, component_id: str) -> tuple[str, ...] | NotFound:
        component = self.graph.component(component_id)
        if component is None:
            return NotFound(component_id)
        return tuple(component.dependents)

    def find_component(self, name_or_id: str) -> Component | NotFound:
        """Look up a component by id, falling back to its name."""
        component = self.graph.component(name_or_id)
        if component is not None:
            return component
        for component_id in self.graph.store.ids():
            candidate = self.graph.store[component_id]
            if candidate.name == name_or_id:
                return candidate
        return NotFound(name_or_id)


class RepositoryAnalyzer:
    """Analyze a batch of symbols and references.

    The analyzer only holds configuration. Every call to ``analyze`` builds a
    fresh store and graph, so one instance can serve independent analyses.
    """

    def __init__(self, config: AnalyzerConfig | None = None):
        self.config = config or AnalyzerConfig()

    def analyze(
        self,
        symbols: Iterable[SymbolRecord],
        references: Iterable[ReferenceFact],
    ) -> AnalysisResult:
        # Stage 1: Symbol store
        store = SymbolStore()
        store.insert_all(symbols)
        logger.info("Starting repository analysis of %d component(s)", len(store))
        if store.rejected:
            logger.info("Rejected %d symbol(s) with invalid line ranges", len(store.rejected))

        # Stage 2: Graph
        builder = DependencyGraphBuilder()
        graph = builder.build(store, references)

        # Stage 3: Cycles
        graph.cycles = detect_cycles(graph)

        # Stage 4: Processing order
        order = compute_processing_order(graph)

        # Stage 5: Insights
        insights = generate_insights(graph, self.config)

        store.seal()
        logger.info(
            "Repository analysis complete. Found %d components, %d edges, %d cycles",
            len(store), len(graph.edges), len(graph.cycles),
        )
        return AnalysisResult(
            graph=graph,
            processing_order=order,
            insights=insights,
            unresolved_references=tuple(builder.unresolved),
            rejected_symbols=tuple(store.rejected),
            config=self.config,
        )
