"""FastAPI application factory and lifespan management."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from propr.config import Settings, settings as default_settings
from propr.jobs.executor import BaseExecutor, SimulatedExecutor
from propr.jobs.store import JobStore

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup and release executor timers on shutdown."""
    executor: BaseExecutor = app.state.executor
    logger.info(
        "ProPR backend started (executor=%s, jobs=%d)",
        type(executor).__name__, len(app.state.job_store),
    )
    yield
    executor.shutdown()
    logger.info("ProPR backend shutdown complete")


def create_app(
    settings: Settings | None = None,
    store: JobStore | None = None,
    executor: BaseExecutor | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    The store and executor are owned by the returned app; pass them in to
    share state with a caller (tests, an alternative executor).
    """
    settings = settings or default_settings
    store = store if store is not None else JobStore()
    if executor is None:
        executor = SimulatedExecutor(store, delay_ms=settings.delay_ms, simulate=settings.simulate)

    app = FastAPI(
        title="ProPR Backend",
        version=VERSION,
        description="Asynchronous pull-request review jobs: submit, then poll for the result.",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )
    app.state.settings = settings
    app.state.job_store = store
    app.state.executor = executor

    # Add middleware (order matters: last added = first executed)
    from propr.api.middleware.cors import CORSMiddleware
    from propr.api.middleware.trace_id import TraceIdMiddleware
    app.add_middleware(TraceIdMiddleware)
    app.add_middleware(CORSMiddleware, fallback_origin=settings.cors_fallback_origin)

    # Register error handlers
    from propr.errors.handlers import register_exception_handlers
    register_exception_handlers(app)

    # Import and mount routers
    from propr.api.router import api_router
    app.include_router(api_router)

    return app
