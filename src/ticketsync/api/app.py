"""FastAPI application setup."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ticketsync.api.dependencies import close_orchestrator, init_orchestrator
from ticketsync.api.models import APIResponse, TicketPayload
from ticketsync.api.routes import health, sync
from ticketsync.logging import setup_logging
from ticketsync.orchestrator import NonRecoverableSyncError, RecoverableSyncError, SyncError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from ticketsync.config import SyncConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TICKETSYNC_CONFIG"
RETRY_AFTER_SECONDS = 60


def _load_app_config(config_path: str | None) -> SyncConfig:
    """Load the sync config, or an empty one when no path is configured."""
    from ticketsync.config import SyncConfig, load_config  # noqa: PLC0415

    path = config_path or os.environ.get(CONFIG_ENV_VAR)
    if not path:
        logger.warning("No configuration file set (%s); every sync will fail", CONFIG_ENV_VAR)
        return SyncConfig()
    return load_config(path)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    from ticketsync.gateway import ConnectWiseGateway  # noqa: PLC0415
    from ticketsync.orchestrator import SyncOrchestrator  # noqa: PLC0415

    # Startup
    setup_logging()
    config = _load_app_config(app.state.config_path)
    gateway = ConnectWiseGateway.from_config(config)
    init_orchestrator(SyncOrchestrator(config=config, gateway=gateway))

    yield
    # Shutdown
    close_orchestrator()


def _sync_error_content(exc: SyncError) -> dict:
    data = TicketPayload.from_ticket(exc.ticket) if exc.ticket is not None else None
    return APIResponse[TicketPayload](data=data, error=str(exc)).model_dump(mode="json")


def add_exception_handlers(app: FastAPI) -> None:
    """Map classified sync failures to HTTP responses."""

    @app.exception_handler(RecoverableSyncError)
    async def recoverable_sync_error_handler(
        _request: Request, exc: RecoverableSyncError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=_sync_error_content(exc),
            headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
        )

    @app.exception_handler(NonRecoverableSyncError)
    async def non_recoverable_sync_error_handler(
        _request: Request, exc: NonRecoverableSyncError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=_sync_error_content(exc),
        )


def create_app(config_path: str | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config_path: YAML configuration file. Defaults to the
            TICKETSYNC_CONFIG environment variable.
    """
    app = FastAPI(
        title="ticketsync API",
        description="Syncs platform tickets with ConnectWise Manage",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.config_path = config_path

    add_exception_handlers(app)

    app.include_router(sync.router, prefix="/api/v1")
    app.include_router(health.router, prefix="/api/v1")

    return app


# Default app instance
app = create_app()
