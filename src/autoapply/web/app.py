"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Sequence

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from autoapply.exceptions import (
    SessionConflictError,
    SessionNotFoundError,
    StoreError,
    ValidationError,
)
from autoapply.orchestrator import SessionRunner
from autoapply.service import AutoApplyService
from autoapply.settings import AppSettings
from autoapply.sources.base import JobSource
from autoapply.sources.registry import build_sources
from autoapply.storage.applications import ApplicationTracker
from autoapply.storage.credentials import CredentialStore
from autoapply.storage.database import Database
from autoapply.storage.preferences import PreferencesStore
from autoapply.storage.profiles import ProfileStore
from autoapply.storage.sessions import SessionStore
from autoapply.web.routes import auto_apply, credentials, jobs, profile, settings as settings_routes

logger = logging.getLogger(__name__)

_ERROR_STATUS: dict[type[Exception], int] = {
    ValidationError: 400,
    SessionNotFoundError: 404,
    SessionConflictError: 400,
    StoreError: 500,
}


def create_app(
    settings: AppSettings | None = None,
    *,
    sources: Sequence[JobSource] | None = None,
) -> FastAPI:
    """Build the API; *sources* replaces the configured job boards (used by tests)."""
    settings = settings or AppSettings.from_yaml()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        db = Database(settings.database_path)
        sessions = SessionStore(db)
        profiles = ProfileStore(db)
        runner = SessionRunner(
            sessions,
            profiles,
            list(sources) if sources is not None else build_sources(settings),
        )
        app.state.db = db
        app.state.profiles = profiles
        app.state.applications = ApplicationTracker(db)
        app.state.credentials = CredentialStore(db)
        app.state.preferences = PreferencesStore(db)
        app.state.service = AutoApplyService(sessions, runner)
        logger.info("AutoApply API ready (sources: %s).", ", ".join(settings.sources))
        try:
            yield
        finally:
            await app.state.service.shutdown()
            db.close()

    app = FastAPI(title="AutoApply", lifespan=lifespan)

    async def _domain_error(request: Request, exc: Exception) -> JSONResponse:
        status = next(code for kind, code in _ERROR_STATUS.items() if isinstance(exc, kind))
        if status >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse({"error": str(exc)}, status_code=status)

    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code)

    for kind in _ERROR_STATUS:
        app.add_exception_handler(kind, _domain_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    for module in (auto_apply, profile, jobs, credentials, settings_routes):
        app.include_router(module.router)
    return app
