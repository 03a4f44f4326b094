"""
FastAPI application factory.

One ``BrowserEngine`` is started in the app lifespan and shared by every request;
it is closed once on shutdown.
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from ..auth import Authorizer, SharedSecretAuthorizer
from ..config import Config
from ..converter import HtmlToPdfConverter
from ..engine import BrowserEngine
from ..errors import ConversionError, RenderEngineUnavailable
from ..logging_utils import get_logger, setup_logging
from .routers import convert, download, health, options

logger = get_logger(__name__)


def create_app(
    config: Optional[Config] = None,
    engine: Optional[BrowserEngine] = None,
    authorizer: Optional[Authorizer] = None,
) -> FastAPI:
    config = config or Config()
    engine = engine or BrowserEngine(executable_path=config.get_chromium_executable())
    authorizer = authorizer or SharedSecretAuthorizer(config.get_letterhead_password())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Initializing HTML to PDF converter...")
        try:
            await engine.start()
            logger.success("Converter initialized successfully")
        except RenderEngineUnavailable as e:
            # Keep serving; conversion endpoints answer 503 until restart
            logger.error(f"Failed to initialize converter: {e}")
        yield
        logger.info("Closing PDF converter...")
        await engine.close()

    app = FastAPI(title="HTML to PDF Converter", version=__version__, lifespan=lifespan)
    app.state.config = config
    app.state.engine = engine
    app.state.converter = HtmlToPdfConverter(engine, authorizer, config)
    app.state.started_at = time.monotonic()

    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    app.include_router(health.router)
    app.include_router(options.router)
    app.include_router(convert.router)
    app.include_router(download.router)

    @app.exception_handler(ConversionError)
    async def _conversion_error(request: Request, exc: ConversionError) -> JSONResponse:
        if exc.http_status >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        else:
            logger.warning(f"{request.method} {request.url.path} rejected: {exc}")
        return JSONResponse(status_code=exc.http_status, content={"error": exc.message, "code": exc.code})

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404 and exc.detail == "Not Found":
            return JSONResponse(status_code=404, content={"error": "Endpoint not found", "code": "NOT_FOUND"})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail, "code": f"HTTP_{exc.status_code}"})

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = f"{location}: {first.get('msg', 'invalid request')}" if location else "Invalid request"
        return JSONResponse(status_code=400, content={"error": message, "code": "INVALID_OPTION"})

    return app


def main() -> None:
    """Run the HTTP service with uvicorn."""
    config = Config()
    setup_logging(debug=config.is_debug())
    uvicorn.run(create_app(config), host=config.get_host(), port=config.get_port())


__all__ = ["create_app", "main"]
