"""Processing order — Kahn's topological sort with dependencies first."""

from __future__ import annotations

import heapq
import logging

from repo_mapper.analysis.graph_models import DependencyGraph, ProcessingOrder

logger = logging.getLogger(__name__)


def compute_processing_order(graph: DependencyGraph) -> ProcessingOrder:
    """Order all components so each one comes after everything it depends on.

    Ready components are emitted smallest id first. Components that never
    become ready sit on or behind a cycle; they are appended in ascending id
    order and ``cycles_present`` is set. The order always covers every
    component.
    """
    store = graph.store

    # Count of dependencies not yet emitted, per component
    pending = {component.id: len(component.dependencies) for component in store}
    ready = [component_id for component_id, count in pending.items() if count == 0]
    heapq.heapify(ready)

    order: list[str] = []
    emitted: set[str] = set()
    while ready:
        component_id = heapq.heappop(ready)
        order.append(component_id)
        emitted.add(component_id)
        for dependent_id in store[component_id].dependents:
            pending[dependent_id] -= 1
            if pending[dependent_id] == 0:
                heapq.heappush(ready, dependent_id)

    blocked = sorted(component_id for component_id in pending if component_id not in emitted)
    if blocked:
        logger.warning(
            "Cycles detected in dependency graph; %d component(s) appended "
            "to the processing order by id",
            len(blocked),
        )
        order.extend(blocked)

    return ProcessingOrder(order=tuple(order), cycles_present=bool(blocked))
