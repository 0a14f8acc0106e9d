"""FastAPI application factory."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shopfloor.application.interfaces import ProcessRestarter
from shopfloor.config import Settings, get_settings
from shopfloor.infrastructure.container import ServiceContainer, build_container
from shopfloor.infrastructure.logging.log_config import setup_logging
from shopfloor.presentation.api.router import build_api_router
from shopfloor.presentation.middleware.activity_log import ActivityLogMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — load the live store and take the boot snapshot."""
    container: ServiceContainer = app.state.container
    settings = container.settings
    setup_logging(settings)

    logger.info("Performing startup system check...")
    await container.startup()

    logger.info("Database path: %s", settings.storage_dir)
    logger.info("Backup path:   %s", settings.backup_dir)
    logger.info("Live engine & vault ready")

    compaction: asyncio.Task | None = None
    if settings.compaction_interval_seconds > 0:
        compaction = asyncio.create_task(
            container.registry.run_compaction(settings.compaction_interval_seconds)
        )

    yield

    if compaction is not None:
        compaction.cancel()
    for task in list(app.state.pending_shutdowns):
        task.cancel()


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: log, answer 500, and optionally end the process."""
    logger.critical(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    container: ServiceContainer = request.app.state.container
    if container.settings.shutdown_on_unexpected_error:
        task = asyncio.create_task(
            container.restarter.restart(f"unhandled {type(exc).__name__}")
        )
        pending: set[asyncio.Task] = request.app.state.pending_shutdowns
        pending.add(task)
        task.add_done_callback(pending.discard)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def create_app(
    settings: Settings | None = None,
    restarter: ProcessRestarter | None = None,
) -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.container = build_container(settings, restarter)
    app.state.pending_shutdowns = set()

    # Audit trail of mutating requests
    app.add_middleware(ActivityLogMiddleware)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(Exception, _unexpected_error_handler)

    # Mount API routes
    app.include_router(build_api_router(settings.resource_collections))

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "shopfloor.main:app",
        host="0.0.0.0",
        port=3000,
    )
