"""
FastAPI application factory and configuration.

This follows the application factory pattern, so tests can build an app
around their own records directory and ADP files.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Dict, Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .engine import DraftEngine
from .middleware.cors import setup_cors
from .routes.health import router as health_router
from .routes.members import router as members_router
from .routes.mock_drafts import router as mock_drafts_router

logging.basicConfig(level=logging.INFO,
                    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up draft simulation API...")

    engine = DraftEngine.from_config(app.state.config)
    app.state.engine = engine
    logger.info(f"Loaded {len(engine.records)} draft records and {len(engine.player_pool)} players")

    logger.info("Startup complete")

    yield

    logger.info("Shutting down draft simulation API...")
    logger.info(f"Discarding {len(engine.sessions)} mock drafts")
    engine.sessions.clear()
    engine.profile_cache.clear()
    logger.info("Shutdown complete")


def create_app(config: Dict[str, Any] = None) -> FastAPI:
    """
    Application factory function.

    Config keys ``records_dir``, ``adp_source_a`` and ``adp_source_b`` point
    at the data loaded on startup; ``random_seed`` makes autopicks
    reproducible.
    """

    default_config = {
        "title": "Draft Simulator",
        "description": "Member behavior modeling and mock draft simulation",
        "version": "1.0.0",
        "debug": False,
        "cors_origins": ["http://localhost:3000", "http://localhost:8080"],
        "records_dir": None,
        "adp_source_a": None,
        "adp_source_b": None,
        "random_seed": None,
    }

    if config:
        default_config.update(config)

    app = FastAPI(
        title=default_config["title"],
        description=default_config["description"],
        version=default_config["version"],
        debug=default_config["debug"],
        lifespan=lifespan,
        docs_url="/docs" if default_config["debug"] else None,  # Disable docs in prod
        redoc_url="/redoc" if default_config["debug"] else None,
    )
    app.state.config = default_config

    setup_cors(app, default_config["cors_origins"])

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add response time header for monitoring."""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        return response

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all requests for monitoring and debugging."""
        start_time = time.time()

        logger.info(f"Request: {request.method} {request.url}")

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"Response: {response.status_code} - {process_time:.3f}s - {request.method} {request.url.path}"
        )

        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions with consistent format."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "type": "http_error",
                    "message": exc.detail,
                    "status_code": exc.status_code,
                }
            }
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors."""
        return JSONResponse(
            status_code=422,
            content={
                "error": {
                    "type": "validation_error",
                    "message": "Request validation failed",
                    "details": [
                        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
                        for err in exc.errors()
                    ],
                }
            }
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(f"Unexpected error: {exc}", exc_info=True)

        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "type": "internal_error",
                    "message": "An unexpected error occurred",
                    # Don't leak error details in production
                    "details": str(exc) if default_config["debug"] else None,
                }
            }
        )

    app.include_router(health_router, prefix="/api/v1", tags=["health"])
    app.include_router(mock_drafts_router, prefix="/api/v1", tags=["mock-drafts"])
    app.include_router(members_router, prefix="/api/v1", tags=["members"])

    @app.get("/")
    async def root():
        """Root endpoint with basic API information."""
        return {
            "name": default_config["title"],
            "version": default_config["version"],
            "description": default_config["description"],
            "docs_url": "/docs" if default_config["debug"] else None,
            "health_check": "/api/v1/health",
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "draftsim.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
