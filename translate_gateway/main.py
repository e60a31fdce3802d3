"""
Translate Gateway
Main FastAPI application entry point.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Optional
import asyncio
import logging
import sys
import time
import traceback

from translate_gateway import __version__
from translate_gateway.api.system import PUBLIC_DIR, router as system_router
from translate_gateway.api.translate import router as translate_router
from translate_gateway.config import Settings, get_settings
from translate_gateway.dependencies import get_logger
from translate_gateway.errors import ApiException, InternalError, NotFoundError, error_response
from translate_gateway.logging_config import LoggingContext
from translate_gateway.schemas.schemas import ApiError
from translate_gateway.services.stats_service import StatsStore
from translate_gateway.services.system_service import SystemService
from translate_gateway.services.translation_service import TranslationService
from translate_gateway.services.translator_client import GoogleTranslateClient
from translate_gateway.supervisor import ProcessSupervisor


def create_app(
    settings: Optional[Settings] = None,
    translator_client=None,
    supervise: bool = True
) -> FastAPI:
    """
    Build the application.

    translator_client replaces the Google client (tests); supervise=False
    leaves process-wide exception hooks alone.
    """
    settings = settings or get_settings()
    supervisor = ProcessSupervisor()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan management."""
        # Startup
        logging_context = LoggingContext(settings)
        logger = logging_context.open()
        logger.info(f"Starting Translate Gateway on port {settings.PORT} (environment={settings.APP_ENV})")

        if supervise:
            supervisor.install(logging_context.child("supervisor"), asyncio.get_running_loop())

        client = translator_client or GoogleTranslateClient.from_settings(
            settings, logger=logging_context.child("translator")
        )
        stats_store = StatsStore(settings.STATS_FILE, logger=logging_context.child("stats"))
        await stats_store.ensure_initialized()

        app.state.logger = logger
        app.state.translation_service = TranslationService(client, logger=logging_context.child("translation"))
        app.state.stats_store = stats_store
        app.state.system_service = SystemService()
        logger.info("Translate Gateway ready")

        yield

        # Shutdown
        logger.info("Shutting down Translate Gateway...")
        if translator_client is None:
            await client.aclose()
        supervisor.uninstall()
        logger.info("HTTP server closed")
        logging_context.close()

    app = FastAPI(
        title="Translate Gateway",
        description="Text translation through an external service, with request statistics.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.supervisor = supervisor

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # Request logging and timing middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every request and add its processing time to the response headers."""
        logger = get_logger(request)
        client_ip = request.client.host if request.client else "-"
        user_agent = request.headers.get("user-agent", "-")
        logger.info(f"Request: {request.method} {request.url.path} (ip={client_ip}, user-agent={user_agent})")

        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response

    @app.exception_handler(ApiException)
    async def api_exception_handler(request: Request, exc: ApiException):
        logger = get_logger(request)
        if exc.status_code >= 500:
            logger.error(f"{exc.error}: {exc.message} ({request.method} {request.url.path})")
        else:
            logger.warning(f"{exc.error}: {exc.code} ({request.method} {request.url.path})")
        return error_response(exc, expose_details=settings.is_development)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Unmatched routes (and wrong methods) answer 404 ENDPOINT_NOT_FOUND."""
        logger = get_logger(request)
        if exc.status_code in (404, 405):
            logger.warning(f"Route not found: {request.method} {request.url.path}")
            return error_response(NotFoundError(request.url.path), expose_details=settings.is_development)

        logger.warning(f"HTTP error {exc.status_code}: {exc.detail} ({request.method} {request.url.path})")
        return JSONResponse(
            status_code=exc.status_code,
            content=ApiError(
                error="HTTP error",
                message=str(exc.detail),
                code=f"HTTP_{exc.status_code}"
            ).model_dump(exclude_none=True),
            headers=getattr(exc, "headers", None)
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger = get_logger(request)
        logger.error(
            f"Internal server error occurred: {request.method} {request.url.path}",
            exc_info=exc
        )
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return error_response(InternalError(details=stack), expose_details=settings.is_development)

    # Include routers
    app.include_router(translate_router)
    app.include_router(system_router)

    if PUBLIC_DIR.is_dir():
        app.mount("/static", StaticFiles(directory=PUBLIC_DIR), name="static")

    return app


app = create_app()


def main():
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        log_level=logging.getLevelName(settings.log_level).lower()
    )
    if app.state.supervisor.failed:
        logging.getLogger(__name__).critical("Exiting after uncaught exception")
        sys.exit(1)


if __name__ == "__main__":
    main()
