"""Graph analysis stages and the orchestrator that runs them."""

from __future__ import annotations

from repo_mapper.analysis.analyzer import AnalysisResult, RepositoryAnalyzer
from repo_mapper.analysis.cycles import cyclic_components, detect_cycles
from repo_mapper.analysis.dependency_graph import DependencyGraphBuilder
from repo_mapper.analysis.graph_models import (
    ArchitecturalLayer,
    DependencyGraph,
    Insights,
    ProcessingOrder,
)
from repo_mapper.analysis.insights import generate_insights
from repo_mapper.analysis.sequencer import compute_processing_order
from repo_mapper.analysis.symbol_store import SymbolStore

__all__ = [
    "AnalysisResult",
    "ArchitecturalLayer",
    "DependencyGraph",
    "DependencyGraphBuilder",
    "Insights",
    "ProcessingOrder",
    "RepositoryAnalyzer",
    "SymbolStore",
    "compute_processing_order",
    "cyclic_components",
    "detect_cycles",
    "generate_insights",
]
