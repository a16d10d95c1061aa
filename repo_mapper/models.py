"""Data models for the repository mapper."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import PurePath


class ComponentKind(enum.Enum):
    FUNCTION = "function"
    METHOD = "method"
    TYPE = "type"
    MODULE = "module"
    INTERFACE = "interface"

    @classmethod
    def _missing_(cls, value):
        # Extractors name types and interfaces after their source language
        aliases = {
            "class": cls.TYPE,
            "struct": cls.TYPE,
            "enum": cls.TYPE,
            "trait": cls.INTERFACE,
            "protocol": cls.INTERFACE,
        }
        if isinstance(value, str):
            lowered = value.lower()
            if lowered in aliases:
                return aliases[lowered]
            for member in cls:
                if member.value == lowered:
                    return member
        return None


class Visibility(enum.Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"
    INTERNAL = "internal"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if member.value == value.lower():
                    return member
        return None


class EdgeType(enum.Enum):
    CALL = "call"
    INHERITANCE = "inheritance"
    IMPORT = "import"
    FIELD_ACCESS = "field_access"
    METHOD_CALL = "method_call"

    @classmethod
    def _missing_(cls, value):
        # Accept "FunctionCall", "ModuleImport", "MethodCall" and friends
        if not isinstance(value, str):
            return None
        key = value.lower().replace("_", "").replace("-", "")
        aliases = {
            "functioncall": cls.CALL,
            "classinheritance": cls.INHERITANCE,
            "moduleimport": cls.IMPORT,
        }
        if key in aliases:
            return aliases[key]
        for member in cls:
            if member.value.replace("_", "") == key:
                return member
        return None


def make_component_id(file_path: str | PurePath, qualified_name: str) -> str:
    """Stable id for a component: ``<posix path>::<qualified name>``."""
    return f"{PurePath(file_path).as_posix()}::{qualified_name}"


@dataclass(frozen=True)
class SymbolRecord:
    """A symbol as reported by an extraction collaborator."""
    id: str
    name: str
    kind: ComponentKind
    file_path: str
    start_line: int
    end_line: int
    visibility: Visibility = Visibility.PUBLIC
    complexity_score: int = 0


@dataclass(frozen=True)
class ReferenceFact:
    """A raw reference from one symbol to another."""
    from_id: str
    to_id: str
    edge_type: EdgeType = EdgeType.CALL


@dataclass
class Component:
    id: str
    name: str
    kind: ComponentKind
    file_path: str
    start_line: int
    end_line: int
    visibility: Visibility = Visibility.PUBLIC
    complexity_score: int = 0
    dependencies: list[str] = field(default_factory=list)  # ids this depends on
    dependents: list[str] = field(default_factory=list)    # ids that depend on this

    @classmethod
    def from_record(cls, record: SymbolRecord) -> Component:
        return cls(
            id=record.id,
            name=record.name,
            kind=record.kind,
            file_path=PurePath(record.file_path).as_posix(),
            start_line=record.start_line,
            end_line=record.end_line,
            visibility=record.visibility,
            complexity_score=max(0, record.complexity_score or 0),
        )


@dataclass(frozen=True)
class DependencyEdge:
    source_id: str
    target_id: str
    edge_type: EdgeType = EdgeType.CALL


@dataclass
class AnalyzerConfig:
    """Configuration for the analysis pipeline and its renderings."""
    most_connected_limit: int = 10
    hotspot_limit: int = 10
    complex_files_limit: int = 10
    order_preview: int = 10
    edge_preview: int = 10
    key_components_shown: int = 5

    def __post_init__(self):
        for name in ("most_connected_limit", "hotspot_limit", "complex_files_limit"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1, got {getattr(self, name)}")
