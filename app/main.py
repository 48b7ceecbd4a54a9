"""Quest Board API - Main Application Module.

This module initializes the FastAPI application with proper configuration,
middleware, routing, and lifecycle management for the board engine.
"""

import logging
import sys
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

# Add the project root to Python path if running directly
if __name__ == "__main__":
    project_root = Path(__file__).parent.parent
    sys.path.insert(0, str(project_root))

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import ConfigValidator, Settings, get_config_summary, settings
from app.core.dependencies import get_persistence, get_store
from app.core.logging import setup_logging
from app.services.persistence_service import JsonFileStorage, PersistenceService
from app.store import BoardStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle events."""
    # Startup
    logger.info(f"🚀 Starting {app.title}...")
    ConfigValidator.validate_required_settings(app.state.settings)
    logger.debug(f"Configuration: {get_config_summary(app.state.settings)}")

    persistence: Optional[PersistenceService] = app.state.persistence
    if persistence:
        loaded = persistence.load()
        persistence.attach()
        logger.info("✅ Board snapshot loaded" if loaded else "📝 Starting with an empty board")
    else:
        logger.info("📝 Persistence disabled: board lives in memory only")

    yield

    # Shutdown
    logger.info(f"🛑 Shutting down {app.title}...")
    if persistence:
        persistence.flush()
        persistence.detach()
        logger.info("✅ Pending snapshot flushed")


def build_persistence(store: BoardStore, config: Settings) -> Optional[PersistenceService]:
    """Create the snapshot adapter configured by ``config``, if enabled."""
    if not config.persistence_enabled:
        return None
    return PersistenceService(
        store,
        JsonFileStorage(config.data_dir),
        key=config.snapshot_key,
        debounce_seconds=config.save_debounce_seconds,
    )


def create_app(
    store: Optional[BoardStore] = None,
    persistence: Optional[PersistenceService] = None,
    config: Optional[Settings] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    A caller-supplied store is used as-is and only persisted when a
    ``persistence`` adapter is passed alongside it.
    """
    config = config or settings
    setup_logging(config)

    if store is None:
        store = BoardStore(activity_capacity=config.activity_log_capacity)
        persistence = persistence or build_persistence(store, config)

    app = FastAPI(
        title=config.app_name,
        description="Hierarchical folder, project and kanban task board with XP rewards",
        version=config.version,
        lifespan=lifespan,
        docs_url="/docs" if config.is_development else None,
        redoc_url="/redoc" if config.is_development else None,
    )
    app.state.store = store
    app.state.persistence = persistence
    app.state.settings = config

    # Add middleware
    setup_middleware(app, config)

    # Add exception handlers
    setup_exception_handlers(app)

    # Include routers
    setup_routers(app)

    return app


def setup_middleware(app: FastAPI, config: Settings):
    """Configure application middleware."""
    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID middleware
    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


def setup_exception_handlers(app: FastAPI):
    """Configure global exception handlers."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Handle custom exceptions that have structured detail
        if isinstance(exc.detail, dict) and "message" in exc.detail:
            message = exc.detail["message"]
            error_code = exc.detail.get("error_code", "HTTP_ERROR")
            details = exc.detail.get("details")
        else:
            message = str(exc.detail) if exc.detail else "An error occurred"
            error_code = "HTTP_ERROR"
            details = None

        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {message}")

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "status": "error",
                "message": message,
                "error_code": error_code,
                "details": details,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "request_id": getattr(request.state, "request_id", None),
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # Convert errors to JSON-serializable format
        errors = []
        for error in exc.errors():
            error_dict = {
                "loc": error.get("loc", []),
                "msg": str(error.get("msg", "Validation error")),
                "type": error.get("type", "value_error"),
            }
            # Handle custom input if present
            if "input" in error:
                error_dict["input"] = str(error["input"])
            errors.append(error_dict)

        return JSONResponse(
            status_code=422,
            content={
                "status": "error",
                "message": "Validation error",
                "error_code": "VALIDATION_ERROR",
                "details": errors,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "request_id": getattr(request.state, "request_id", None),
            },
        )


def setup_routers(app: FastAPI):
    """Configure application routers."""
    # Import routers
    from app.domains.activity.controller import router as activity_router
    from app.domains.board.controller import router as board_router
    from app.domains.comment.controller import router as comment_router
    from app.domains.focus.controller import router as focus_router
    from app.domains.folder.controller import router as folder_router
    from app.domains.insights.controller import router as insights_router
    from app.domains.project.controller import router as project_router

    config: Settings = app.state.settings

    # Health check endpoint
    @app.get("/health")
    async def health_check(
        store: BoardStore = Depends(get_store),
        persistence: Optional[PersistenceService] = Depends(get_persistence),
    ):
        """Health check endpoint reporting snapshot storage state."""
        if persistence is None:
            storage_status = "disabled"
        elif persistence.degraded:
            storage_status = "degraded"
        else:
            storage_status = "healthy"
        return {
            "status": "degraded" if storage_status == "degraded" else "healthy",
            "version": config.version,
            "environment": config.environment,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "services": {
                "storage": storage_status,
            },
            "counts": {
                "folders": len(store.folders),
                "projects": len(store.projects),
                "tasks": len(store.tasks),
            },
        }

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": config.app_name,
            "version": config.version,
            "description": "Folders, projects and kanban boards with XP rewards",
            "docs_url": "/docs" if config.is_development else None,
        }

    # Include domain routers
    app.include_router(folder_router)
    app.include_router(project_router)
    app.include_router(board_router)
    app.include_router(comment_router)
    app.include_router(activity_router)
    app.include_router(focus_router)
    app.include_router(insights_router)


# Create the application instance
app = create_app()


def main():
    """Entry point for running the application directly."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.value.lower(),
    )


if __name__ == "__main__":
    main()
