"""
Stream offer relay application package
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi import HTTPException
from fastapi.exceptions import RequestValidationError

from relay.cache import TokenSweeper
from relay.config import Config, Settings
from relay.models import ErrorResponse
from relay.state import AppState
from relay.stream import InvalidStreamUrl, StreamUrlError, UnrecognizedLayout
from relay.routes.root import router as root_router
from relay.routes.stream import router as stream_router
from relay.routes.nowplaying import router as nowplaying_router
from relay.routes.offer import router as offer_router

logger = logging.getLogger(__name__)


def create_app(state: Optional[AppState] = None) -> FastAPI:
    """Create and configure FastAPI application"""

    if state is None:
        state = AppState(Settings.from_env())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        sweeper = TokenSweeper(state.store, state.settings.sweep_interval_sec)
        sweeper.start()
        logger.info(
            "Relay ready: %d artists mapped, token TTL %ss",
            len(state.sku_map),
            state.settings.short_token_ttl_sec,
        )
        try:
            yield
        finally:
            sweeper.stop()

    # Initialize FastAPI app
    app = FastAPI(
        title=Config.TITLE,
        description=Config.DESCRIPTION,
        version=Config.VERSION,
        docs_url=Config.DOCS_URL,
        redoc_url=Config.REDOC_URL,
        lifespan=lifespan,
    )
    app.state.relay = state

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=Config.ALLOW_ORIGINS,
        allow_credentials=Config.ALLOW_CREDENTIALS,
        allow_methods=Config.ALLOW_METHODS,
        allow_headers=Config.ALLOW_HEADERS,
    )

    # Include routers
    app.include_router(root_router)
    app.include_router(stream_router)
    app.include_router(nowplaying_router)
    app.include_router(offer_router)

    # Exception handlers
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request, exc):
        """Custom HTTP exception handler"""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                detail=str(exc.detail),
                error_type="HTTPException"
            ).model_dump()
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc):
        """Malformed request bodies are caller input errors: 400"""
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(
                detail="invalid request body",
                error_type="InvalidInput"
            ).model_dump()
        )

    @app.exception_handler(StreamUrlError)
    async def stream_url_exception_handler(request, exc):
        """Bad playlist URLs: 400 when unparsable, 422 when the layout is unknown"""
        content = ErrorResponse(detail=str(exc), error_type=exc.error_type).model_dump()
        if isinstance(exc, UnrecognizedLayout):
            content["parsed"] = exc.parsed
            return JSONResponse(status_code=422, content=content)
        return JSONResponse(status_code=400, content=content)

    return app


__all__ = ["create_app", "AppState", "InvalidStreamUrl", "UnrecognizedLayout"]
