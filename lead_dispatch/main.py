"""
Application entry point: FastAPI app, lifespan and error handlers.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from lead_dispatch import __version__
from lead_dispatch.config import settings
from lead_dispatch.db.helpers import DatabaseError
from lead_dispatch.db.pool import db_pool
from lead_dispatch.db.schema import ensure_schema
from lead_dispatch.features.task_distribution import tasks_router
from lead_dispatch.features.task_distribution.domain import TaskDistributionError
from lead_dispatch.infrastructure.observability.logging import get_logger, setup_logging
from lead_dispatch.middleware import RequestContextMiddleware
from lead_dispatch.routes import health

# Setup logging before creating the app
setup_logging(log_level=settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database pool on startup and close it on shutdown."""

    logger.info("Application starting", environment=settings.environment, debug=settings.debug)

    try:
        await db_pool.initialize()
        if settings.DB_AUTO_CREATE_SCHEMA:
            await ensure_schema()
        logger.info("All services initialized successfully")

    except Exception as e:
        logger.error("Failed to initialize services", error=str(e))
        try:
            await db_pool.close()
        except Exception as cleanup_error:
            logger.error("Error cleaning up database pool", error=str(cleanup_error))
        raise

    yield

    logger.info("Application shutting down")
    await db_pool.close()


app = FastAPI(
    title="Lead Dispatch",
    description="Upload lead lists and distribute them evenly across field agents",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(RequestContextMiddleware)

app.include_router(health.router)
app.include_router(tasks_router)


@app.exception_handler(TaskDistributionError)
async def handle_task_distribution_error(request: Request, exc: TaskDistributionError):
    """Render expected pipeline failures as {message, ...} with their status code."""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "Request failed with domain error",
        path=request.url.path,
        error_type=type(exc).__name__,
        status_code=exc.status_code,
        error=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(DatabaseError)
async def handle_database_error(request: Request, exc: DatabaseError):
    logger.error(
        "Request failed with database error",
        path=request.url.path,
        operation=exc.operation,
        error=str(exc),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Database operation failed"},
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error", path=request.url.path, error_type=type(exc).__name__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
