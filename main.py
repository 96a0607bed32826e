"""
Finance dashboard API — application entry point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from datetime import timedelta

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import register_exception_handlers
from api.middleware import register_middleware
from api.routes import router as api_router
from auth.jwt import TokenService
from auth.password import PasswordHasher
from auth.routes import router as auth_router
from auth.service import Authenticator
from config.settings import Settings, get_settings
from database.session import build_engine, build_session_factory
from database.users import UserStore

logger = logging.getLogger(__name__)


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        stream=sys.stdout,
    )
    for _noisy in ("sqlalchemy.engine", "aiosqlite", "asyncio", "uvicorn.access"):
        logging.getLogger(_noisy).setLevel(logging.WARNING)


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application and its process-wide services.

    The engine, session factory and token service are created here once
    and shared through ``app.state``; nothing reads the secret per request.
    """
    settings = settings or get_settings()

    engine = build_engine(settings)
    session_factory = build_session_factory(engine)
    ttl = timedelta(seconds=settings.jwt_expiry_seconds)
    tokens = TokenService(settings.jwt_secret, ttl, algorithm=settings.jwt_algorithm)
    authenticator = Authenticator(
        store=UserStore(session_factory),
        hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
        tokens=tokens,
        token_ttl=ttl,
        require_username=settings.require_username,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Application ready (token ttl %ss, usernames %s)",
            settings.jwt_expiry_seconds,
            "required" if settings.require_username else "optional",
        )
        yield
        await engine.dispose()
        logger.info("Database engine disposed")

    app = FastAPI(
        title="Finance Dashboard API",
        version="1.0.0",
        description="Account registration, login and protected dashboard data.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.authenticator = authenticator

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app, request_timeout=settings.request_timeout_seconds)
    register_exception_handlers(app)

    # Routes
    app.include_router(auth_router, prefix="/auth")
    app.include_router(api_router)

    return app


if __name__ == "__main__":
    config = get_settings()
    configure_logging(config.debug)
    uvicorn.run(
        "main:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
