"""
LifeOS Dashboard Backend - FastAPI Application

This is the main entry point for the LifeOS REST API: momentum tasks,
roadmaps, resource search, the document vault and financial intake.

Usage:
    uvicorn lifeos.dashboard.backend.main:app --host 127.0.0.1 --port 8080 --reload

    Or run directly:
    python -m lifeos.dashboard.backend.main
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

# Load .env file before anything else
from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lifeos import __version__
from lifeos.config import get_section
from lifeos.dashboard.backend.models import ErrorResponse, HealthCheck
from lifeos.dashboard.backend.routes import api_router
from lifeos.database import get_connection
from lifeos.errors import NotFoundError, UnauthorizedError
from lifeos.logging_config import setup_logging


setup_logging()
logger = logging.getLogger(__name__)

dashboard_config = get_section("dashboard")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("Starting LifeOS Dashboard Backend...")

    # Create tables up front so the first request doesn't pay for it
    conn = get_connection()
    conn.close()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down LifeOS Dashboard Backend...")


# Create FastAPI application
app = FastAPI(
    title="LifeOS API",
    description="REST API for the LifeOS recovery dashboard",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# Configure CORS
security_config = dashboard_config.get("security") or {}
allowed_origins = security_config.get(
    "allowed_origins", ["http://localhost:3000", "http://127.0.0.1:3000"]
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Health Check Endpoint
# =============================================================================


@app.get("/api/health", response_model=HealthCheck, tags=["health"])
async def health_check():
    """Check database and session store health."""
    services = {}

    try:
        conn = get_connection()
        conn.execute("SELECT 1")
        conn.close()
        services["database"] = "healthy"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        services["database"] = "unhealthy"

    try:
        from lifeos.security.session import get_connection as get_session_db

        conn = get_session_db()
        conn.execute("SELECT 1")
        conn.close()
        services["sessions"] = "healthy"
    except Exception as e:
        logger.warning(f"Session store health check failed: {e}")
        services["sessions"] = "unhealthy"

    overall = "healthy" if all(s == "healthy" for s in services.values()) else "degraded"
    return HealthCheck(status=overall, version=__version__, timestamp=datetime.now(), services=services)


# =============================================================================
# Error Handlers
# =============================================================================


def _error(status_code: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message, code=code).model_dump(),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with consistent format."""
    return _error(exc.status_code, str(exc.detail), f"HTTP_{exc.status_code}")


@app.exception_handler(UnauthorizedError)
async def unauthorized_handler(request: Request, exc: UnauthorizedError):
    logger.warning(f"Unauthorized {request.method} {request.url.path}: {exc}")
    return _error(status.HTTP_403_FORBIDDEN, str(exc) or "Unauthorized", "UNAUTHORIZED")


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return _error(status.HTTP_404_NOT_FOUND, str(exc) or "Not found", "NOT_FOUND")


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return _error(status.HTTP_400_BAD_REQUEST, str(exc), "INVALID_REQUEST")


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "INTERNAL_ERROR")


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(api_router)


# =============================================================================
# Main Entry Point
# =============================================================================


def run():
    import uvicorn

    host = dashboard_config.get("host", "127.0.0.1")
    port = dashboard_config.get("api_port", 8080)

    uvicorn.run("lifeos.dashboard.backend.main:app", host=host, port=port, log_level="info")


if __name__ == "__main__":
    run()
