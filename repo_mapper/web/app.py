"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from repo_mapper import __version__
from repo_mapper.web.api import router


def create_app() -> FastAPI:
    app = FastAPI(title="repo-mapper", version=__version__)
    app.include_router(router)

    @app.get("/api/health")
    async def health():
        return {"status": "ok", "version": __version__}

    return app
