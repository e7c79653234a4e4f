"""
ASGI entry point.

``app`` is the FastAPI application; ``asgi_app`` wraps it with the Socket.IO
server and is what uvicorn should serve::

    uvicorn chamber.main:asgi_app
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

import socketio
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from chamber.api.v1.api import api_router
from chamber.core.config import DEFAULT_JWT_SECRET, Settings, settings as default_settings
from chamber.core.errors import format_validation_error
from chamber.db.init_db import init_db
from chamber.db.session import ensure_sqlite_directory
from chamber.state import AppState

logger = logging.getLogger(__name__)


def check_jwt_secret(settings: Settings) -> None:
    if settings.JWT_SECRET != DEFAULT_JWT_SECRET:
        return
    if settings.ENVIRONMENT == "production":
        raise RuntimeError("JWT_SECRET must be set in production")
    logger.warning("JWT_SECRET is not set; using the development default")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    state = AppState.build(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        check_jwt_secret(settings)
        ensure_sqlite_directory(state.engine)
        state.storage.ensure_directory()
        db = state.session_factory()
        try:
            init_db(db, state.engine, settings)
        finally:
            db.close()
        logger.info(f"{settings.PROJECT_NAME} started ({settings.ENVIRONMENT})")
        yield
        state.close()

    app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION, lifespan=lifespan)
    app.state.chamber = state

    app.add_middleware(GZipMiddleware, minimum_size=1024)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"message": format_validation_error(exc.errors())})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    @app.get("/", include_in_schema=False)
    def root():
        return {"message": f"{settings.PROJECT_NAME} API", "version": settings.VERSION}

    app.include_router(api_router, prefix=settings.API_PREFIX)
    return app


app = create_app()
asgi_app = socketio.ASGIApp(app.state.chamber.broadcaster.sio, other_asgi_app=app)
