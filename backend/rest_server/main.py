import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError

from .api import build_api_router
from .api.errors import (
    http_exception_handler,
    validation_exception_handler,
    general_exception_handler
)
from .core.config import Settings, get_settings
from .core.exceptions import BootstrapError
from .core.logging import setup_logging
from .services.bootstrap import BootstrapSequencer
from .services.credential_store import CredentialStore
from .services.etcd import get_etcd_client, cleanup_etcd_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    settings: Settings = app.state.settings
    setup_logging(settings.LOG_LEVEL)

    etcd_client = get_etcd_client(settings.ETCD_URI, settings.ETCD_TIMEOUT)
    await etcd_client.connect()

    credential_store = CredentialStore(etcd_client, strict_writes=settings.ETCD_STRICT_WRITES)
    sequencer = BootstrapSequencer(settings, etcd_client, credential_store)

    app.state.etcd_client = etcd_client
    app.state.credential_store = credential_store
    app.state.bootstrap = sequencer

    # Nothing is served until bootstrap has finished
    try:
        await sequencer.run()
    except BootstrapError:
        logger.critical("Bootstrap failed, refusing to start")
        await cleanup_etcd_client()
        raise

    if not settings.is_test:
        ok, error = await credential_store.load_users()
        if not ok:
            logger.warning(f"Could not load existing users: {error}")

    yield

    # Shutdown
    await cleanup_etcd_client()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application; configuration errors surface here, before serving"""
    settings = settings or get_settings()

    app = FastAPI(
        title="REST Server",
        description="User credential management backed by etcd",
        version=settings.VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.settings = settings

    # Add exception handlers
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Include API routes
    app.include_router(build_api_router(settings.API_V1_STR))

    @app.get("/")
    async def root():
        return {
            "message": "REST Server",
            "version": settings.VERSION,
            "status": "operational",
            "docs_url": "/docs"
        }

    return app


def run():
    """Console entry point"""
    import uvicorn

    uvicorn.run(create_app(), host="0.0.0.0", port=9186)
