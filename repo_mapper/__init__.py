"""repo-mapper: dependency graph, cycle and processing-order analysis over extracted code symbols."""

from __future__ import annotations

from repo_mapper.analysis.analyzer import AnalysisResult, RepositoryAnalyzer
from repo_mapper.errors import (
    DuplicateComponentError,
    InvalidRange,
    NotFound,
    RepoMapError,
    UnknownComponentError,
    UnresolvedReference,
)
from repo_mapper.models import (
    AnalyzerConfig,
    Component,
    ComponentKind,
    DependencyEdge,
    EdgeType,
    ReferenceFact,
    SymbolRecord,
    Visibility,
    make_component_id,
)

__version__ = "0.1.0"

__all__ = [
    "AnalysisResult",
    "AnalyzerConfig",
    "Component",
    "ComponentKind",
    "DependencyEdge",
    "DuplicateComponentError",
    "EdgeType",
    "InvalidRange",
    "NotFound",
    "ReferenceFact",
    "RepoMapError",
    "RepositoryAnalyzer",
    "SymbolRecord",
    "UnknownComponentError",
    "UnresolvedReference",
    "Visibility",
    "make_component_id",
]
