"""In-memory state for the HTTP API — no database required."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime

from repo_mapper.analysis.analyzer import AnalysisResult


@dataclass
class AnalysisSession:
    result: AnalysisResult
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    label: str = ""
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


class AppState:
    """Analysis results shared by all API routes.

    Each session holds its own finished result; nothing is shared between
    sessions.
    """

    def __init__(self):
        self.analyses: dict[str, AnalysisSession] = {}

    def add(self, session: AnalysisSession) -> None:
        self.analyses[session.id] = session

    def get(self, analysis_id: str) -> AnalysisSession | None:
        return self.analyses.get(analysis_id)

    def delete(self, analysis_id: str) -> bool:
        return self.analyses.pop(analysis_id, None) is not None

    def clear(self) -> None:
        self.analyses.clear()


# Shared by every route in repo_mapper.web.api
state = AppState()
