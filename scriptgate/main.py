"""ScriptGate FastAPI application factory + lifespan lifecycle.

This module implements:
  - create_app(config) — testable application factory; one independent app per call
  - lifespan           — @asynccontextmanager startup/shutdown sequence
  - /health router     — delegated to scriptgate/health.py
  - /script mount      — ScriptStaticFiles raw passthrough for non-browser clients

Request flow:
  ScriptGateMiddleware (outermost) → RENDER / BLOCK answered in the middleware
                                   → PASSTHROUGH continues to the router:
                                       /health, the /script mount, or a 404

There is no module-level app instance. uvicorn builds one through the factory:
  uvicorn scriptgate.main:create_app --factory --host 0.0.0.0 --port 80
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from scriptgate import __version__
from scriptgate.config import Config, load_config
from scriptgate.gate.middleware import ScriptGateMiddleware
from scriptgate.gate.static import ScriptStaticFiles
from scriptgate.health import router as health_router
from scriptgate.utils.logger import configure_logging, get_logger

# ─── Logging Setup ────────────────────────────────────────────────────────────
DEBUG = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO" if not DEBUG else "DEBUG")
JSON_LOGS = os.getenv("JSON_LOGS", "true").lower() == "true"

configure_logging(log_level=LOG_LEVEL, json_output=JSON_LOGS)
logger = get_logger(__name__)

_INTERNAL_ERROR_BODY = "<!doctype html><html><body><h2>Internal server error</h2></body></html>"


# ─── Lifespan ─────────────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan — startup and shutdown sequence.

    Startup:
      1. Verify the script root (missing root is a warning, not fatal:
         RENDER answers 404 and passthrough answers 404 until it appears)
      2. app.state.ready = True
      3. Log the example script URL

    Shutdown:
      app.state.ready = False
    """
    config: Config = app.state.config
    root = config.content.root_path
    logger.info("ScriptGate starting up...", root=root, prefix=config.content.prefix)

    if not os.path.isdir(root):
        logger.warning("Script root does not exist or is not a directory", root=root)

    app.state.ready = True
    logger.info(
        "Server running",
        url=f"http://localhost:{config.server.port}{config.content.prefix}library.lua",
    )
    logger.info("Browser-friendly viewer available; raw files still served to non-browser clients")

    yield

    logger.info("ScriptGate shutting down...")
    app.state.ready = False
    logger.info("ScriptGate shutdown complete")


# ─── Application Factory ──────────────────────────────────────────────────────


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Create and configure the ScriptGate FastAPI application.

    Call this directly in tests with an explicit Config to get an isolated
    instance rooted wherever the test wants:
        app = create_app(config)

    Args:
        config: Fully-built Config. When None, load_config() is called.

    Returns:
        Configured FastAPI application with lifespan, routers, mount and middleware.
    """
    if config is None:
        config = load_config()

    # The gate BLOCKs browsers on every path outside the script mount, so the
    # interactive docs could never be opened. Keep them off.
    application = FastAPI(
        title="ScriptGate",
        description="User-agent gated script hosting",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    application.state.config = config
    application.state.ready = False

    # Register routers
    application.include_router(health_router)

    # Raw passthrough for non-browser clients.
    application.mount(
        config.content.mount_path,
        ScriptStaticFiles(
            directory=config.content.root_path,
            raw_text_extensions=config.content.raw_text_extensions,
        ),
        name="scripts",
    )

    # Script gate: the only middleware, so it is outermost and sees every request.
    application.add_middleware(
        ScriptGateMiddleware,
        root_dir=config.content.root_path,
        markers=config.classifier.markers,
        prefix=config.content.prefix,
        snippet_base_url=config.content.snippet_base_url,
    )

    # Global exception handlers
    @application.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        logger.warning(
            "HTTP exception",
            status_code=exc.status_code,
            detail=exc.detail,
            path=request.scope.get("path"),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @application.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> HTMLResponse:
        logger.error(
            "Unhandled exception",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.scope.get("path"),
        )
        return HTMLResponse(status_code=500, content=_INTERNAL_ERROR_BODY)

    return application
