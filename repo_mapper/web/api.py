"""Analysis API — run an analysis, fetch its document, map, point queries and diffs."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from repo_mapper.analysis.analyzer import AnalysisResult, RepositoryAnalyzer
from repo_mapper.analysis.diff import diff_results
from repo_mapper.errors import NotFound, RepoMapError
from repo_mapper.render import render_repository_map
from repo_mapper.serialization import AnalysisInput, to_document
from repo_mapper.web.state import AnalysisSession, state

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analysis")
_analyzer = RepositoryAnalyzer()


class AnalyzeRequest(AnalysisInput):
    label: str = ""


class DiffRequest(BaseModel):
    old_id: str
    new_id: str


def _get_session(analysis_id: str) -> AnalysisSession:
    session = state.get(analysis_id)
    if not session:
        raise HTTPException(404, "Analysis not found")
    return session


def _run(req: AnalyzeRequest) -> AnalysisResult:
    return _analyzer.analyze(req.to_records(), req.to_facts())


@router.post("/analyze")
async def analyze(req: AnalyzeRequest):
    try:
        result = await asyncio.to_thread(_run, req)
    except RepoMapError as e:
        logger.warning("Analysis rejected: %s", e)
        raise HTTPException(400, str(e))

    session = AnalysisSession(result=result, label=req.label)
    state.add(session)
    logger.info("Stored analysis %s (%d components)", session.id, len(result.graph.store))
    return {
        "analysis_id": session.id,
        **to_document(result).model_dump(mode="json"),
    }


@router.post("/diff")
async def diff_analyses(req: DiffRequest):
    old = _get_session(req.old_id)
    new = _get_session(req.new_id)
    return {
        "old_id": old.id,
        "new_id": new.id,
        **diff_results(old.result, new.result),
    }


@router.get("/{analysis_id}")
async def get_analysis(analysis_id: str):
    session = _get_session(analysis_id)
    return {
        "analysis_id": session.id,
        **to_document(session.result).model_dump(mode="json"),
    }


@router.get("/{analysis_id}/map")
async def get_map(
    analysis_id: str,
    focus: str | None = None,
    show_order: bool = False,
    show_dependencies: bool = False,
):
    session = _get_session(analysis_id)
    text = render_repository_map(
        session.result,
        repository=session.label or None,
        focus=focus,
        show_order=show_order,
        show_dependencies=show_dependencies,
    )
    document = to_document(session.result)
    return {
        "analysis_id": session.id,
        "map": text,
        "entry_points": document.entry_points,
        "most_connected_components": document.most_connected_components,
        "cycles": document.cycles,
    }


@router.get("/{analysis_id}/dependencies")
async def get_dependencies(analysis_id: str, component_id: str):
    session = _get_session(analysis_id)
    ids = session.result.dependencies_of(component_id)
    if isinstance(ids, NotFound):
        raise HTTPException(404, f"Component '{component_id}' not found")
    return {"component_id": component_id, "dependencies": list(ids)}


@router.get("/{analysis_id}/dependents")
async def get_dependents(analysis_id: str, component_id: str):
    session = _get_session(analysis_id)
    ids = session.result.dependents_of(component_id)
    if isinstance(ids, NotFound):
        raise HTTPException(404, f"Component '{component_id}' not found")
    return {"component_id": component_id, "dependents": list(ids)}


@router.delete("/{analysis_id}")
async def delete_analysis(analysis_id: str):
    if not state.delete(analysis_id):
        raise HTTPException(404, "Analysis not found")
    return {"deleted": analysis_id}
