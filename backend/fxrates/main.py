import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from fxrates import __version__
from fxrates.api.routes import api_router
from fxrates.core import errors
from fxrates.core.config import Settings, get_settings
from fxrates.core.logging import init_logging, request_context_middleware
from fxrates.db.session import build_engine
from fxrates.services.store import RateStore
from fxrates.services.sync import RateSynchronizer, RateSyncWorker


logger = logging.getLogger("fxrates")


def create_app(settings: Settings | None = None, store: RateStore | None = None) -> FastAPI:
    settings = settings or get_settings()
    init_logging(settings.log_level, settings.log_json, service=settings.app_name)

    store = store or RateStore(build_engine(settings))
    synchronizer = RateSynchronizer.from_settings(store, settings)
    worker = RateSyncWorker(synchronizer, settings.sync_interval_seconds)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await asyncio.to_thread(store.create_schema, retries=settings.db_connect_retries)
        logger.info("database schema verified")
        if settings.sync_on_startup:
            worker.start()
        logger.info("%s started", settings.app_name)
        try:
            yield
        finally:
            await worker.stop()
            store.engine.dispose()

    app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.synchronizer = synchronizer
    app.state.sync_worker = worker

    app.middleware("http")(request_context_middleware)

    origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.add_exception_handler(errors.RateServiceError, errors.rate_service_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    @app.get("/")
    def root() -> dict:
        return {
            "name": settings.app_name,
            "version": __version__,
            "docs": "/docs",
        }

    app.include_router(api_router, prefix=settings.api_prefix)
    return app


def run() -> None:
    import uvicorn

    uvicorn.run("fxrates.main:create_app", factory=True, host="0.0.0.0", port=8080)
