"""FastAPI application for the RhythmFlow server"""

import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from rhythmflow import __version__
from rhythmflow.api.catalog_client import CatalogClient
from rhythmflow.auth.credential_store import CredentialStore
from rhythmflow.auth.token_service import Clock, TokenService
from rhythmflow.services.auth_gateway import AuthGateway
from rhythmflow.services.collection_store import CollectionStore
from rhythmflow.storage.json_storage import JsonFileStorage
from rhythmflow.utils.config import Settings, load_settings
from rhythmflow.utils.exceptions import RhythmFlowError
from rhythmflow.utils.logger import configure_logging, get_logger

from .api import catalog_router, router

logger = get_logger(__name__)


class RequestLogMiddlewareASGI:
    """Raw ASGI middleware logging method, path, status and duration. Bodies are never logged."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        start = time.monotonic()
        status_holder = {"status": 500}

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                status_holder["status"] = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            logger.info(
                "Request handled",
                method=scope.get("method"),
                path=scope.get("path"),
                status_code=status_holder["status"],
                duration_ms=round((time.monotonic() - start) * 1000, 1),
            )


def _error_response(
    settings: Settings, status_code: int, message: str, details: Optional[str] = None
) -> JSONResponse:
    content = {"error": message}
    if details and settings.is_development:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _install_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(RhythmFlowError)
    async def rhythmflow_error_handler(request: Request, exc: RhythmFlowError):
        if exc.status_code >= 500:
            logger.error(
                "Request failed",
                path=request.url.path,
                error=exc.message,
                details=exc.details,
            )
        return _error_response(settings, exc.status_code, exc.message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error_response(settings, 400, "Invalid request", str(exc.errors()))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", path=request.url.path, error=str(exc))
        return _error_response(settings, 500, "Internal server error", repr(exc))


def create_app(settings: Optional[Settings] = None, clock: Optional[Clock] = None) -> FastAPI:
    """
    Build the application.

    Settings default to the environment; a missing TOKEN_SECRET raises
    ConfigError here, before the server accepts any request.
    """
    settings = settings or load_settings()
    configure_logging(settings.logging)

    app = FastAPI(
        title="RhythmFlow",
        description="Music discovery server: catalog proxy, accounts and saved playlists",
        version=__version__,
    )

    token_kwargs = {"clock": clock} if clock is not None else {}
    app.state.settings = settings
    app.state.gateway = AuthGateway(
        credentials=CredentialStore(
            JsonFileStorage(settings.accounts_file),
            bcrypt_rounds=settings.bcrypt_rounds,
        ),
        collections=CollectionStore(JsonFileStorage(settings.collections_file)),
        tokens=TokenService(settings.token_secret, **token_kwargs),
    )
    app.state.catalog = CatalogClient(
        api_base_url=settings.catalog.api_base_url,
        timeout=settings.catalog.timeout,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_middleware(RequestLogMiddlewareASGI)

    _install_exception_handlers(app, settings)
    app.include_router(router)
    app.include_router(catalog_router)

    @app.on_event("shutdown")
    async def shutdown_event():
        app.state.catalog.close()

    logger.info(
        "Application configured",
        data_dir=str(settings.data_dir),
        environment=settings.environment,
    )
    return app
