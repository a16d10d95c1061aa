"""Result diff — compare two analyses of the same repository by component id."""

from __future__ import annotations

from repo_mapper.analysis.analyzer import AnalysisResult
from repo_mapper.models import Component


def diff_results(old: AnalysisResult, new: AnalysisResult) -> dict:
    """Compare two analysis results.

    Returns: {added, removed, modified, unchanged, new_cycles, resolved_cycles}
    """
    old_store = old.graph.store
    new_store = new.graph.store
    old_ids = set(old_store.ids())
    new_ids = set(new_store.ids())

    added = sorted(new_ids - old_ids)
    removed = sorted(old_ids - new_ids)

    modified: list[dict] = []
    unchanged = 0
    for component_id in sorted(old_ids & new_ids):
        changes = _component_changes(old_store[component_id], new_store[component_id])
        if changes:
            modified.append({"id": component_id, "changes": changes})
        else:
            unchanged += 1

    old_cycles = {frozenset(members): members for members in old.cycles}
    new_cycles = {frozenset(members): members for members in new.cycles}

    return {
        "added": added,
        "removed": removed,
        "modified": modified,
        "unchanged": unchanged,
        "new_cycles": [members for key, members in new_cycles.items() if key not in old_cycles],
        "resolved_cycles": [members for key, members in old_cycles.items() if key not in new_cycles],
    }


def _component_changes(before: Component, after: Component) -> list[str]:
    changes: list[str] = []
    if (before.file_path, before.start_line, before.end_line) != (
        after.file_path, after.start_line, after.end_line,
    ):
        changes.append("location")
    if before.kind != after.kind or before.visibility != after.visibility:
        changes.append("signature")
    if before.complexity_score != after.complexity_score:
        changes.append("complexity")
    if set(before.dependencies) != set(after.dependencies):
        changes.append("dependencies")
    if set(before.dependents) != set(after.dependents):
        changes.append("dependents")
    return changes
