"""FastAPI routes for the analysis service."""

from __future__ import annotations

import asyncio
from pathlib import Path

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from dep_analyze.errors import ConfigurationError, ParseError
from dep_analyze.pipeline import ProjectDependencyAnalyzer
from dep_analyze.report import sorted_artifacts
from dep_analyze.resolver import load_graph
from dep_analyze.web.state import AnalysisRecord, ServiceState

router = APIRouter(prefix="/api")


class AnalyzeRequest(BaseModel):
    manifest: str
    name: str = "analyzeClassesDependencies"
    classes_dirs: list[str] = []


def _state(request: Request) -> ServiceState:
    return request.app.state.service


def _analyze(state: ServiceState, req: AnalyzeRequest) -> dict:
    manifest = Path(req.manifest).expanduser().resolve()
    if not manifest.is_file():
        raise HTTPException(404, f"Manifest not found: {manifest}")

    try:
        graph = load_graph(manifest)
        dirs = [Path(d) for d in req.classes_dirs] or graph.classes_dirs
        if not dirs:
            raise HTTPException(400, "No compiled classes given")
        analysis = ProjectDependencyAnalyzer(graph.roles, dirs, state.cache).analyze(req.name)
    except ConfigurationError as e:
        raise HTTPException(400, str(e))
    except ParseError as e:
        raise HTTPException(422, str(e))

    result = analysis.result
    state.record(AnalysisRecord(
        name=req.name,
        manifest=str(manifest),
        violations=len(result.used_undeclared) + len(result.unused_declared),
    ))
    return {
        "name": analysis.name,
        "used_declared": [str(a) for a in sorted_artifacts(result.used_declared)],
        "used_undeclared": [str(a) for a in sorted_artifacts(result.used_undeclared)],
        "unused_declared": [str(a) for a in sorted_artifacts(result.unused_declared)],
        "has_violations": result.has_violations,
        "ambiguous_classes": {
            w.class_name: [str(o) for o in w.owners] for w in analysis.ambiguities
        },
        "classes_used": len(analysis.usage),
        "dependencies_scanned": len(analysis.index.nodes),
    }


@router.post("/analyze")
async def analyze(req: AnalyzeRequest, request: Request):
    return await asyncio.to_thread(_analyze, _state(request), req)


@router.get("/cache")
async def cache_stats(request: Request):
    return _state(request).cache.stats()


@router.delete("/cache")
async def clear_cache(request: Request):
    _state(request).reset_cache()
    return {"cleared": True}


@router.get("/history")
async def history(request: Request):
    return [
        {"name": r.name, "manifest": r.manifest, "violations": r.violations, "timestamp": r.timestamp}
        for r in _state(request).history
    ]
