"""Symbol store — the single owner of Component records, keyed by component id."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from repo_mapper.errors import (
    DuplicateComponentError,
    InvalidRange,
    RepoMapError,
)
from repo_mapper.models import Component, SymbolRecord

logger = logging.getLogger(__name__)


class SymbolStore:
    """Arena of components. Everything else refers to components by id."""

    def __init__(self):
        self._components: dict[str, Component] = {}
        self.rejected: list[InvalidRange] = []
        self._sealed = False

    def insert(self, record: SymbolRecord) -> Component | None:
        """Add a symbol record as a component.

        Returns the stored component, or None when the record was rejected
        for an invalid line range. A record whose id is already stored for
        the same file is ignored; the same id in a different file raises
        DuplicateComponentError.
        """
        self._check_open()

        if record.end_line < record.start_line:
            logger.debug(
                "Rejecting %s: end line %d before start line %d",
                record.id, record.end_line, record.start_line,
            )
            self.rejected.append(InvalidRange(record))
            return None

        component = Component.from_record(record)
        existing = self._components.get(component.id)
        if existing is not None:
            if existing.file_path != component.file_path:
                raise DuplicateComponentError(
                    component.id, existing.file_path, component.file_path,
                )
            logger.debug("Ignoring repeated symbol %s", component.id)
            return existing

        self._components[component.id] = component
        return component

    def insert_all(self, records: Iterable[SymbolRecord]) -> None:
        for record in records:
            self.insert(record)

    def get(self, component_id: str) -> Component | None:
        return self._components.get(component_id)

    def __getitem__(self, component_id: str) -> Component:
        return self._components[component_id]

    def __contains__(self, component_id: object) -> bool:
        return component_id in self._components

    def __iter__(self) -> Iterator[Component]:
        return iter(self._components.values())

    def __len__(self) -> int:
        return len(self._components)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SymbolStore):
            return NotImplemented
        return self._components == other._components

    def ids(self) -> list[str]:
        return sorted(self._components)

    def seal(self) -> None:
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def _check_open(self) -> None:
        if self._sealed:
            raise RepoMapError("Symbol store is sealed; start a new analysis instead")
