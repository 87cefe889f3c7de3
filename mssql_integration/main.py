"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (request context)
  - Mount the integration router under /v1
  - Expose health check endpoint
  - Close the connection pool on shutdown

Collaborators:
  - routes.router: action and lifecycle endpoints
  - container: integration and pool manager singletons
  - exception_handlers: RFC 7807 error responses

Constraints:
  - The pool is not opened at startup; the first action (or /v1/register)
    opens it

Notes:
  - Run with: uvicorn mssql_integration.main:app
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import __version__
from .config import get_settings
from .container import get_integration, get_pool_manager
from .exception_handlers import register_exception_handlers
from .logger import logger
from .middleware import RequestContextMiddleware
from .routes import router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Validates settings and closes the pool."""
    # R: Raises ValidationError if env vars are missing/invalid
    settings = get_settings()
    logger.setLevel(settings.log_level.upper())

    logger.info(
        "Microsoft SQL integration starting up",
        extra={
            "server": settings.connection_config().server,
            "database": settings.database,
            "pool_size": settings.pool_size,
            "pool_idle_timeout_seconds": settings.pool_idle_timeout_seconds,
        },
    )
    yield

    get_integration().unregister()
    logger.info("Microsoft SQL integration shutting down")


app = FastAPI(
    title="Microsoft SQL Integration",
    description="Microsoft SQL integration to manage database operations directly within your bot.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(RequestContextMiddleware)

# R: Register API routes under /v1 prefix for versioning
app.include_router(router, prefix="/v1")

# R: Register exception handlers for structured error responses
register_exception_handlers(app)


@app.get("/healthz")
def healthz() -> dict:
    """
    R: Liveness check.

    Reports whether the pool has been opened; it does not touch the database.
    """
    return {"ok": True, "pool": "open" if get_pool_manager().is_open else "closed"}
