"""Exceptions, recorded analysis conditions and the typed empty query result."""

from __future__ import annotations

from dataclasses import dataclass

from repo_mapper.models import ReferenceFact, SymbolRecord


class RepoMapError(Exception):
    """Base class for errors raised by the repository mapper."""


class DuplicateComponentError(RepoMapError):
    """The same component id was reported for two different files."""

    def __init__(self, component_id: str, first_file: str, second_file: str):
        self.component_id = component_id
        self.first_file = first_file
        self.second_file = second_file
        super().__init__(
            f"Component id {component_id!r} is claimed by both "
            f"{first_file!r} and {second_file!r}"
        )


class UnknownComponentError(RepoMapError, KeyError):
    """An edge was added to the graph with an endpoint the store does not hold."""

    def __init__(self, component_id: str):
        self.component_id = component_id
        super().__init__(component_id)

    def __str__(self) -> str:
        return f"Unknown component id: {self.component_id!r}"


@dataclass(frozen=True)
class UnresolvedReference:
    """A reference fact naming an id absent from the symbol store. The edge is dropped."""
    fact: ReferenceFact
    missing_id: str


@dataclass(frozen=True)
class InvalidRange:
    """A symbol record whose end line precedes its start line. The record is rejected."""
    record: SymbolRecord

    @property
    def component_id(self) -> str:
        return self.record.id


@dataclass(frozen=True)
class NotFound:
    """Empty result of a query for a component that is not in the graph."""
    component_id: str

    def __bool__(self) -> bool:
        return False

    def __len__(self) -> int:
        return 0

    def __iter__(self):
        return iter(())
