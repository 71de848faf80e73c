"""FastAPI application entrypoint."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException

from catalog.config import Settings, get_settings
from catalog.api.v1.router import api_router
from catalog.core.exceptions import CatalogError
from catalog.services.media_service import LocalDiskIngestor, build_media_ingestor

logger = logging.getLogger(__name__)


def _failure(status_code: int, msg: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "msg": msg}, headers=headers)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = app.state.settings
    logger.info(
        "Starting %s (env=%s, media=%s)",
        settings.app_name,
        settings.environment,
        app.state.media_ingestor.name,
    )
    yield
    logger.info("Shutting down %s", settings.app_name)


def register_exception_handlers(app: FastAPI) -> None:
    """Every failure leaves the API as a {success: false, msg} envelope."""

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
        return _failure(exc.status_code, exc.message, headers=headers)

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException):
        return _failure(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        detail = "; ".join(
            f"{'.'.join(str(p) for p in e.get('loc', ()) if p != 'body')}: {e.get('msg')}" for e in errors
        )
        return _failure(status.HTTP_400_BAD_REQUEST, detail or "Invalid request")

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    app = FastAPI(
        title=settings.app_name,
        description="Serial and episode catalog backend",
        version="0.1.0",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.media_ingestor = build_media_ingestor(settings)
    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/")
    def health():
        return {"success": True, "msg": "Backend is running"}

    # Local backend references are relative paths served from here
    ingestor = app.state.media_ingestor
    if isinstance(ingestor, LocalDiskIngestor):
        Path(ingestor.upload_dir).mkdir(parents=True, exist_ok=True)
        app.mount(
            ingestor.url_prefix,
            StaticFiles(directory=str(ingestor.upload_dir)),
            name="uploads",
        )

    return app


app = create_app()
