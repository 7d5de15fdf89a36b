"""
User Authentication & Articles API — application entry point.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import register_exception_handlers
from api.middleware import register_middleware
from api.routes import router as api_router
from auth.jwt import TokenIssuer
from auth.routes import router as auth_router
from config.settings import Settings, load_settings
from database.models import init_db
from database.session import build_engine, build_session_factory

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
        stream=sys.stdout,
    )
    for _noisy in ("sqlalchemy.engine", "asyncio"):
        logging.getLogger(_noisy).setLevel(logging.WARNING)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()

    app = FastAPI(
        title="User Authentication API",
        version="1.0.0",
        description="API for user and articles",
        docs_url="/api-docs",
        redoc_url=None,
    )

    # Process-wide state, built once and reached through ``request.app.state``
    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_issuer = TokenIssuer(settings.jwt_secret, settings.jwt_expiry_seconds)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_exception_handlers(app)

    # Routes
    app.include_router(auth_router, prefix="/auth")
    app.include_router(api_router)

    @app.on_event("startup")
    async def on_startup():
        logger.info("Creating database tables…")
        await init_db(engine)
        logger.info("Application ready to accept requests.")

    @app.on_event("shutdown")
    async def on_shutdown():
        await engine.dispose()
        logger.info("Database connections released.")

    return app


_settings = load_settings()
configure_logging(_settings)
app = create_app(_settings)

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=_settings.host,
        port=_settings.port,
        reload=_settings.debug,
        log_level="debug" if _settings.debug else "info",
    )
