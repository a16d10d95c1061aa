"""Structured documents — the collaborator input format and the analysis result format."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from repo_mapper.analysis.analyzer import AnalysisResult
from repo_mapper.analysis.cycles import detect_cycles
from repo_mapper.analysis.graph_models import DependencyGraph
from repo_mapper.analysis.insights import generate_insights
from repo_mapper.analysis.sequencer import compute_processing_order
from repo_mapper.analysis.symbol_store import SymbolStore
from repo_mapper.errors import InvalidRange, UnresolvedReference
from repo_mapper.models import (
    AnalyzerConfig,
    ComponentKind,
    EdgeType,
    ReferenceFact,
    SymbolRecord,
    Visibility,
    make_component_id,
)

logger = logging.getLogger(__name__)


# ── Input ─────────────────────────────────────────────────────

class SymbolInput(BaseModel):
    id: str | None = None
    name: str
    qualified_name: str | None = None
    kind: ComponentKind = ComponentKind.FUNCTION
    file_path: str
    start_line: int = 1
    end_line: int = 1
    visibility: Visibility = Visibility.PUBLIC
    complexity_score: int | None = 0

    @field_validator("kind", mode="before")
    @classmethod
    def _parse_kind(cls, value: Any) -> Any:
        return ComponentKind(value) if isinstance(value, str) else value

    @field_validator("visibility", mode="before")
    @classmethod
    def _parse_visibility(cls, value: Any) -> Any:
        return Visibility(value) if isinstance(value, str) else value

    def to_record(self) -> SymbolRecord:
        component_id = self.id or make_component_id(
            self.file_path, self.qualified_name or self.name,
        )
        return SymbolRecord(
            id=component_id,
            name=self.name,
            kind=self.kind,
            file_path=self.file_path,
            start_line=self.start_line,
            end_line=self.end_line,
            visibility=self.visibility,
            complexity_score=self.complexity_score or 0,
        )


class ReferenceInput(BaseModel):
    from_id: str
    to_id: str
    edge_type: EdgeType = EdgeType.CALL

    @field_validator("edge_type", mode="before")
    @classmethod
    def _parse_edge_type(cls, value: Any) -> Any:
        return EdgeType(value) if isinstance(value, str) else value

    def to_fact(self) -> ReferenceFact:
        return ReferenceFact(self.from_id, self.to_id, self.edge_type)


class AnalysisInput(BaseModel):
    symbols: list[SymbolInput] = Field(default_factory=list)
    references: list[ReferenceInput] = Field(default_factory=list)

    def to_records(self) -> list[SymbolRecord]:
        return [symbol.to_record() for symbol in self.symbols]

    def to_facts(self) -> list[ReferenceFact]:
        return [reference.to_fact() for reference in self.references]


def load_input(path: str | Path) -> AnalysisInput:
    """Read a collaborator input document from a JSON file."""
    return AnalysisInput.model_validate_json(Path(path).read_text(encoding="utf-8"))


# ── Output ────────────────────────────────────────────────────

class ComponentDocument(BaseModel):
    id: str
    name: str
    kind: ComponentKind
    visibility: Visibility
    file_path: str
    start_line: int
    end_line: int
    complexity_score: int = 0
    dependencies: list[str] = Field(default_factory=list)
    dependents: list[str] = Field(default_factory=list)


class EdgeDocument(BaseModel):
    from_id: str
    to_id: str
    edge_type: EdgeType


class LayerDocument(BaseModel):
    name: str
    files: list[str] = Field(default_factory=list)
    description: str = ""


class UnresolvedDocument(BaseModel):
    from_id: str
    to_id: str
    edge_type: EdgeType
    missing_id: str


class RejectedDocument(BaseModel):
    id: str
    name: str
    kind: ComponentKind
    visibility: Visibility
    file_path: str
    start_line: int
    end_line: int
    complexity_score: int = 0


class LimitsDocument(BaseModel):
    most_connected: int = Field(default=10, ge=1)
    hotspots: int = Field(default=10, ge=1)
    complex_files: int = Field(default=10, ge=1)


class AnalysisDocument(BaseModel):
    total_components: int = 0
    total_files: int = 0
    total_edges: int = 0
    components: list[ComponentDocument] = Field(default_factory=list)
    edges: list[EdgeDocument] = Field(default_factory=list)
    cycles: list[list[str]] = Field(default_factory=list)
    cycles_present: bool = False
    entry_points: list[str] = Field(default_factory=list)
    most_connected_components: list[str] = Field(default_factory=list)
    dependency_hotspots: list[str] = Field(default_factory=list)
    most_complex_files: list[str] = Field(default_factory=list)
    architectural_layers: list[LayerDocument] = Field(default_factory=list)
    processing_order: list[str] = Field(default_factory=list)
    unresolved_references: list[UnresolvedDocument] = Field(default_factory=list)
    rejected_symbols: list[RejectedDocument] = Field(default_factory=list)
    limits: LimitsDocument = Field(default_factory=LimitsDocument)


# Fields computed from the graph rather than carried as input
_DERIVED_FIELDS = (
    "total_components",
    "total_files",
    "total_edges",
    "cycles",
    "cycles_present",
    "entry_points",
    "most_connected_components",
    "dependency_hotspots",
    "most_complex_files",
    "architectural_layers",
    "processing_order",
)


def to_document(result: AnalysisResult) -> AnalysisDocument:
    store = result.graph.store
    insights = result.insights
    return AnalysisDocument(
        total_components=insights.total_components,
        total_files=insights.total_files,
        total_edges=insights.total_edges,
        components=[
            ComponentDocument(
                id=c.id,
                name=c.name,
                kind=c.kind,
                visibility=c.visibility,
                file_path=c.file_path,
                start_line=c.start_line,
                end_line=c.end_line,
                complexity_score=c.complexity_score,
                dependencies=list(c.dependencies),
                dependents=list(c.dependents),
            )
            for c in (store[component_id] for component_id in store.ids())
        ],
        edges=[
            EdgeDocument(from_id=e.source_id, to_id=e.target_id, edge_type=e.edge_type)
            for e in result.graph.edges
        ],
        cycles=[list(members) for members in result.cycles],
        cycles_present=result.cycles_present,
        entry_points=list(insights.entry_points),
        most_connected_components=list(insights.most_connected_components),
        dependency_hotspots=list(insights.dependency_hotspots),
        most_complex_files=list(insights.most_complex_files),
        architectural_layers=[
            LayerDocument(name=layer.name, files=list(layer.files), description=layer.description)
            for layer in insights.architectural_layers
        ],
        processing_order=list(result.topological_order),
        unresolved_references=[
            UnresolvedDocument(
                from_id=u.fact.from_id,
                to_id=u.fact.to_id,
                edge_type=u.fact.edge_type,
                missing_id=u.missing_id,
            )
            for u in result.unresolved_references
        ],
        rejected_symbols=[
            RejectedDocument(
                id=r.record.id,
                name=r.record.name,
                kind=r.record.kind,
                visibility=r.record.visibility,
                file_path=r.record.file_path,
                start_line=r.record.start_line,
                end_line=r.record.end_line,
                complexity_score=r.record.complexity_score,
            )
            for r in result.rejected_symbols
        ],
        limits=LimitsDocument(
            most_connected=result.config.most_connected_limit,
            hotspots=result.config.hotspot_limit,
            complex_files=result.config.complex_files_limit,
        ),
    )


def to_json(result: AnalysisResult, indent: int | None = 2) -> str:
    return to_document(result).model_dump_json(indent=indent)


def from_document(document: AnalysisDocument | dict | str) -> AnalysisResult:
    """Rebuild an analysis result from its structured document.

    Components are re-inserted and edges replayed in document order, which
    reproduces each component's dependency and dependent lists. Cycles,
    processing order and insights are then recomputed from that graph using
    the document's ranking limits; stored values that disagree are logged
    and discarded.
    """
    if isinstance(document, str):
        document = AnalysisDocument.model_validate_json(document)
    elif isinstance(document, dict):
        document = AnalysisDocument.model_validate(document)

    store = SymbolStore()
    for c in document.components:
        store.insert(SymbolRecord(
            id=c.id,
            name=c.name,
            kind=c.kind,
            file_path=c.file_path,
            start_line=c.start_line,
            end_line=c.end_line,
            visibility=c.visibility,
            complexity_score=c.complexity_score,
        ))

    graph = DependencyGraph(store=store)
    for e in document.edges:
        graph.add_edge(e.from_id, e.to_id, e.edge_type)

    config = AnalyzerConfig(
        most_connected_limit=document.limits.most_connected,
        hotspot_limit=document.limits.hotspots,
        complex_files_limit=document.limits.complex_files,
    )
    graph.cycles = detect_cycles(graph)
    order = compute_processing_order(graph)
    insights = generate_insights(graph, config)
    store.seal()

    result = AnalysisResult(
        graph=graph,
        processing_order=order,
        insights=insights,
        unresolved_references=tuple(
            UnresolvedReference(
                fact=ReferenceFact(u.from_id, u.to_id, u.edge_type),
                missing_id=u.missing_id,
            )
            for u in document.unresolved_references
        ),
        rejected_symbols=tuple(
            InvalidRange(SymbolRecord(
                id=r.id,
                name=r.name,
                kind=r.kind,
                file_path=r.file_path,
                start_line=r.start_line,
                end_line=r.end_line,
                visibility=r.visibility,
                complexity_score=r.complexity_score,
            ))
            for r in document.rejected_symbols
        ),
        config=config,
    )

    stale = stale_fields(document, to_document(result))
    if stale:
        logger.warning("Document fields out of date with its graph, recomputed: %s", ", ".join(stale))
    return result


def stale_fields(stored: AnalysisDocument, fresh: AnalysisDocument) -> list[str]:
    """Derived fields of *stored* that differ from a freshly computed document."""
    return [
        name for name in _DERIVED_FIELDS
        if getattr(stored, name) != getattr(fresh, name)
    ]


def from_json(text: str) -> AnalysisResult:
    return from_document(text)
