"""FastAPI application for the room discovery backend."""
from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from .core.config import Settings, get_settings, validate_runtime_settings
from .core.errors import ConfigurationError, register_exception_handlers
from .core.logs import configure_logging
from .db.session import build_engine, build_sessionmaker, ping
from .routers import auth as auth_router
from .routers import health as health_router
from .routers import rooms as rooms_router

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application with its routers and error handlers.

    Handlers read ``settings`` through ``app.state``, so an app built with
    injected settings never falls back to the environment.
    """

    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Missing config or an unreachable store must stop the process before it serves.
        validate_runtime_settings(settings)
        engine = build_engine(settings)
        try:
            await ping(engine)
        except (SQLAlchemyError, OSError) as exc:
            await engine.dispose()
            logger.error("Database unreachable at startup: %s", exc)
            raise ConfigurationError("Database is unreachable") from exc

        app.state.sessionmaker = build_sessionmaker(engine)
        logger.info("%s %s started (%s)", settings.service_name, settings.service_version, settings.app_env)
        try:
            yield
        finally:
            await engine.dispose()
            logger.info("%s shutting down", settings.service_name)

    app = FastAPI(title="Room Discovery API", version=settings.service_version, lifespan=lifespan)
    app.state.settings = settings

    if settings.cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_allow_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    app.include_router(health_router.router)
    app.include_router(auth_router.router, prefix="/auth", tags=["auth"])
    app.include_router(rooms_router.router, prefix="/room", tags=["rooms"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=app.state.settings.host, port=app.state.settings.port)
