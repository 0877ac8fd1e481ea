"""
FastAPI Application Entry Point

This is the main application module that builds the FastAPI app from an
explicit Settings value, configures middleware, and includes all routers.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from employee_service.config import Settings, get_settings
from employee_service.database import Database
from employee_service.models import AuditFailureDetail
from employee_service.routers import employees, health
from employee_service.services.audit_store import AuditLogStore
from employee_service.services.employee_manager import AuditLogWriteError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events:
    - Startup: Open the record store pool and make sure both the employees
      table and the audit table exist
    - Shutdown: Close database connections gracefully
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info(f"Starting {settings.app_name}...")

    database = Database(settings)
    await database.connect()
    if settings.db_bootstrap_schema:
        await database.ensure_schema()

    audit_store = AuditLogStore.from_settings(settings)
    await audit_store.ensure_table_ready()

    app.state.database = database
    app.state.audit_store = audit_store
    logger.info(f"{settings.app_name} started successfully")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}...")
    await database.disconnect()
    logger.info(f"{settings.app_name} stopped")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    ``settings`` is fixed for the lifetime of the app and shared read-only
    by every request through ``app.state.settings``.
    """
    settings = settings or get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format=settings.log_format
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="""
        # Employee Service API

        CRUD service for employee records with an audit trail:

        - **Record store**: PostgreSQL holds the employee rows
        - **Audit log**: every create, update and delete is mirrored into a
          DynamoDB table, partitioned by department and keyed by a unique
          correlation id

        The two writes are not transactional. If the audit write fails after
        the record store committed, the API answers `500` with the correlation
        id of the missing entry.
        """,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan
    )
    app.state.settings = settings

    # ========================================================================
    # Middleware
    # ========================================================================

    # CORS (configure appropriately for production)
    if settings.debug:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def add_request_timing(request: Request, call_next):
        """Add request timing header for monitoring."""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        return response

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all incoming requests."""
        logger.debug(f"{request.method} {request.url.path}")
        response = await call_next(request)
        return response

    # ========================================================================
    # Exception Handlers
    # ========================================================================

    @app.exception_handler(AuditLogWriteError)
    async def audit_log_write_handler(request: Request, exc: AuditLogWriteError):
        """
        The record store committed but the audit entry is missing.

        Reported apart from generic failures so the caller knows the
        mutation took effect and which correlation id was lost.
        """
        body = AuditFailureDetail(
            action=exc.action,
            employee_id=exc.employee_id,
            correlation_id=exc.correlation_id
        )
        return JSONResponse(status_code=500, content=body.model_dump(mode="json"))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Global exception handler.

        Returns generic error responses to prevent information leakage.
        Detailed errors are logged internally.
        """
        logger.exception(f"Unhandled exception: {exc}")

        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"}
        )

    # ========================================================================
    # Routers
    # ========================================================================

    app.include_router(employees.router)
    app.include_router(health.router)
    app.add_api_route(settings.metrics_path, health.metrics, methods=["GET"], tags=["monitoring"])

    @app.get("/", tags=["root"])
    async def root():
        """
        Root endpoint.

        Returns basic service information.
        """
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "status": "running"
        }

    return app


app = create_app()


# ============================================================================
# Development Server
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "employee_service.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=1 if settings.debug else settings.workers
    )
