"""Dependency graph builder — turns reference facts into edges between stored components."""

from __future__ import annotations

import logging
from typing import Iterable

from repo_mapper.analysis.graph_models import DependencyGraph
from repo_mapper.analysis.symbol_store import SymbolStore
from repo_mapper.errors import UnresolvedReference
from repo_mapper.models import ReferenceFact

logger = logging.getLogger(__name__)


class DependencyGraphBuilder:
    """Build a dependency graph from a symbol store and reference facts."""

    def __init__(self):
        self.unresolved: list[UnresolvedReference] = []

    def build(
        self,
        store: SymbolStore,
        references: Iterable[ReferenceFact],
    ) -> DependencyGraph:
        graph = DependencyGraph(store=store)
        self.unresolved = []

        # Edges are applied one at a time; adjacency updates are order-dependent
        for fact in references:
            missing = self._missing_endpoint(store, fact)
            if missing is not None:
                logger.debug(
                    "Dropping %s reference %s -> %s: unknown id %s",
                    fact.edge_type.value, fact.from_id, fact.to_id, missing,
                )
                self.unresolved.append(UnresolvedReference(fact=fact, missing_id=missing))
                continue
            graph.add_edge(fact.from_id, fact.to_id, fact.edge_type)

        if self.unresolved:
            logger.info(
                "Dropped %d unresolved reference(s) while building the graph",
                len(self.unresolved),
            )
        logger.debug(
            "Built graph with %d components and %d edges",
            len(store), len(graph.edges),
        )
        return graph

    @staticmethod
    def _missing_endpoint(store: SymbolStore, fact: ReferenceFact) -> str | None:
        if fact.from_id not in store:
            return fact.from_id
        if fact.to_id not in store:
            return fact.to_id
        return None
