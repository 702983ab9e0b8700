# crisma/main.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from crisma.api import catechists, dashboard, groups, participants, session
from crisma.api.deps import NotLoggedIn, not_logged_in_body
from crisma.api.system import router as system_router
from crisma.api_client import ApiClient, ApiError
from crisma.config import Settings, load_settings
from crisma.context import AppContext
from crisma.logging_config import setup_logging
from crisma.services.list_view import CommandInFlight

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, api: Optional[ApiClient] = None) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    app = FastAPI(title="Crisma App")
    app.state.context = AppContext(settings=settings, api=api)

    # --- CORS for local frontend dev ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Error mapping: every failure becomes {"error": message} ---
    @app.exception_handler(ApiError)
    async def _api_error(request: Request, exc: ApiError) -> JSONResponse:
        # transport / decoding problems have no upstream status: bad gateway
        status = exc.status_code if exc.status_code and exc.status_code >= 400 else 502
        return JSONResponse(status_code=status, content={"error": exc.message})

    @app.exception_handler(CommandInFlight)
    async def _in_flight(request: Request, exc: CommandInFlight) -> JSONResponse:
        return JSONResponse(status_code=409, content={"error": str(exc)})

    @app.exception_handler(NotLoggedIn)
    async def _not_logged_in(request: Request, exc: NotLoggedIn) -> JSONResponse:
        return JSONResponse(status_code=401, content=not_logged_in_body())

    # Routers
    app.include_router(system_router)       # /health, /version
    app.include_router(session.router)      # /session
    app.include_router(dashboard.router)    # /dashboard
    app.include_router(participants.router)  # /participants (+ import, sacraments)
    app.include_router(catechists.router)   # /catechists
    app.include_router(groups.router)       # /groups (+ members)

    logger.info("Crisma console ready; backend at %s", settings.api_base_url)
    return app


app = create_app()
