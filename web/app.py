"""
FastAPI application for the appraisal engine API.

Production deployment configuration via environment variables
(see utils.config.Config).
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.agents import AgentError, UnknownAgentError
from core.reports import InvalidStatusTransition
from core.storage import RecordNotFoundError, UnknownTableError
from utils.config import Config

from web.identity import USER_ID_HEADER, USER_ROLE_HEADER
from web.analysis_routes import router as analysis_router
from web.form_routes import router as form_router
from web.property_routes import router as property_router
from web.report_routes import router as report_router
from web.user_routes import router as user_router


logger = logging.getLogger(__name__)

APP_VERSION = "0.1.0"

# Development fallback only
DEV_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


# =============================================================================
# Error Handlers
# =============================================================================


async def invalid_transition_handler(request: Request, exc: InvalidStatusTransition) -> JSONResponse:
    return JSONResponse(status_code=409, content=exc.to_dict())


async def not_found_handler(request: Request, exc: RecordNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={"error": "not_found", "message": str(exc), "table": exc.table, "id": exc.record_id},
    )


async def agent_error_handler(request: Request, exc: AgentError) -> JSONResponse:
    error = "unknown_agent" if isinstance(exc, UnknownAgentError) else "invalid_agent_input"
    return JSONResponse(status_code=400, content={"error": error, "message": str(exc)})


async def unknown_table_handler(request: Request, exc: UnknownTableError) -> JSONResponse:
    logger.error("Route referenced unknown table %s", exc.table)
    return JSONResponse(status_code=500, content={"error": "internal_error", "message": "Storage misconfigured"})


# =============================================================================
# Application Factory
# =============================================================================


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or Config.load()

    app = FastAPI(
        title="TerraFusionPro Appraisal Engine",
        description="Comparable adjustments, market analysis and appraisal report workflow",
        version=APP_VERSION,
        debug=config.debug,
    )

    allowed_origins = config.allowed_origins or (DEV_ORIGINS if config.debug else [])
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Content-Type", USER_ID_HEADER, USER_ROLE_HEADER],
    )

    app.add_exception_handler(InvalidStatusTransition, invalid_transition_handler)
    app.add_exception_handler(RecordNotFoundError, not_found_handler)
    app.add_exception_handler(AgentError, agent_error_handler)
    app.add_exception_handler(UnknownTableError, unknown_table_handler)

    app.include_router(user_router)
    app.include_router(property_router)
    app.include_router(report_router)
    app.include_router(form_router)
    app.include_router(analysis_router)

    @app.get("/")
    async def root():
        """Service banner and health probe."""
        return {"service": "terrafusion-appraisal", "status": "ok", "version": APP_VERSION}

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": APP_VERSION,
            "environment": "development" if config.debug else "production",
        }

    return app


# Create app instance for uvicorn
app = create_app()
