"""FastAPI application entry point"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api.v1.endpoints import admin, proxy
from .core.config import Settings, settings as default_settings
from .core.exceptions import ProxyError
from .core.logging_config import configure_logging
from .services.mode_controller import ModeController
from .services.player import Player
from .services.proxy_handler import ProxyHandler
from .services.recorder import Recorder
from .services.statistics import ProxyStatistics, RequestHistory
from .storage.filesystem import FileSystemRepository

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    upstream_transport: Optional[httpx.AsyncBaseTransport] = None
) -> FastAPI:
    """
    Build the proxy application with its own set of components.

    Each app gets its own repository, mode, statistics and history, so several
    apps (e.g. in tests) never share state.

    Args:
        settings: Settings to use (defaults to the environment/proxy.yaml settings)
        upstream_transport: httpx transport for record mode (defaults to the network)
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        logger.info(f"📍 Starting proxy server on {settings.address}")
        logger.info(f"📁 Recordings directory: {settings.recordings_dir}")
        logger.info(f"🎯 Default mode: {settings.mode.value}")
        logger.info(f"🔒 TLS verification: {not settings.tls_skip_verify}")
        logger.info(f"📊 Existing recordings: {app.state.repository.count()}")
        yield
        logger.info(f"🛑 Shutting down, total recordings saved: {app.state.repository.count()}")

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        HTTP Replay Proxy

        Deterministic stand-in for live HTTP dependencies in integration tests.

        ## Modes

        - **record** - forward each request to its real target and store the exchange
        - **playback** - answer from stored exchanges without touching the network

        ## Usage

        Send any request to `/<any-path>?target=<host/path or URL>`. Requests are
        matched on method, target and body; headers are ignored.
        """,
        debug=settings.debug,
        lifespan=lifespan
    )

    repository = FileSystemRepository(Path(settings.recordings_dir))
    mode_controller = ModeController(settings.mode)
    statistics = ProxyStatistics()
    history = RequestHistory()

    recorder = Recorder(
        repository,
        timeout=settings.upstream_timeout,
        verify_tls=not settings.tls_skip_verify,
        transport=upstream_transport
    )
    player = Player(repository)

    app.state.settings = settings
    app.state.started_at = datetime.now(timezone.utc)
    app.state.repository = repository
    app.state.mode_controller = mode_controller
    app.state.statistics = statistics
    app.state.history = history
    app.state.proxy_handler = ProxyHandler(mode_controller, recorder, player, statistics, history)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        if request.url.path != "/health":
            client = request.client.host if request.client else "-"
            query = f"?{request.url.query}" if request.url.query else ""
            logger.info(f"[{client}] {request.method} {request.url.path}{query}")
        return await call_next(request)

    @app.exception_handler(ProxyError)
    async def proxy_error_handler(request: Request, exc: ProxyError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "time": datetime.now(timezone.utc).isoformat()
        }

    # Admin routes must be registered before the catch-all proxy route
    app.include_router(admin.router)
    app.include_router(proxy.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower()
    )
