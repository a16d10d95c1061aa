"""Cycle detection — Tarjan's strongly connected components over the dependency graph."""

from __future__ import annotations

import logging
from typing import Iterator

from repo_mapper.analysis.graph_models import DependencyGraph

logger = logging.getLogger(__name__)


def detect_cycles(graph: DependencyGraph) -> list[list[str]]:
    """Find every circular dependency in the graph.

    Runs Tarjan's algorithm once over all components. Roots are taken in
    ascending id order and successors in dependency order, so the result is
    reproducible. An SCC is reported when it has more than one member, or a
    single member that depends on itself. Members are listed in the order
    the search discovered them.

    The traversal keeps its own stack of successor iterators instead of
    recursing, so long dependency chains do not hit the recursion limit.
    """
    store = graph.store
    index: dict[str, int] = {}
    lowlink: dict[str, int] = {}
    scc_stack: list[str] = []
    on_stack: set[str] = set()
    cycles: list[list[str]] = []
    counter = 0

    def visit(node_id: str) -> tuple[str, Iterator[str]]:
        nonlocal counter
        index[node_id] = counter
        lowlink[node_id] = counter
        counter += 1
        scc_stack.append(node_id)
        on_stack.add(node_id)
        return node_id, iter(store[node_id].dependencies)

    for root_id in store.ids():
        if root_id in index:
            continue

        work = [visit(root_id)]
        while work:
            node_id, successors = work[-1]

            descended = False
            for successor in successors:
                if successor not in index:
                    work.append(visit(successor))
                    descended = True
                    break
                if successor in on_stack:
                    lowlink[node_id] = min(lowlink[node_id], index[successor])
            if descended:
                continue

            work.pop()

            if lowlink[node_id] == index[node_id]:
                members: list[str] = []
                while True:
                    member = scc_stack.pop()
                    on_stack.discard(member)
                    members.append(member)
                    if member == node_id:
                        break
                members.reverse()
                if len(members) > 1 or graph.has_self_edge(node_id):
                    cycles.append(members)

            if work:
                parent_id = work[-1][0]
                lowlink[parent_id] = min(lowlink[parent_id], lowlink[node_id])

    if cycles:
        logger.info("Detected %d cycle(s) in the dependency graph", len(cycles))
        for i, members in enumerate(cycles, 1):
            logger.debug("Cycle %d: %s", i, " -> ".join(members))
    return cycles


def cyclic_components(cycles: list[list[str]]) -> set[str]:
    """Ids of every component that takes part in some cycle."""
    return {member for members in cycles for member in members}
