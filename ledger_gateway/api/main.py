"""FastAPI application factory"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from ledger_gateway.api.errors import register_exception_handlers
from ledger_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from ledger_gateway.api.routes import auth, feed
from ledger_gateway.config import Settings, get_settings
from ledger_gateway.domain.exceptions import NotConfiguredError
from ledger_gateway.infrastructure.database.seed import init_db
from ledger_gateway.infrastructure.database.session import build_engine, build_session_factory
from ledger_gateway.infrastructure.observability.logging import setup_logging
from ledger_gateway.infrastructure.security.tokens import TokenSigner


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    This is the composition root: settings, the database engine and the
    token signer are built once here and shared through app.state.

    Run with: uvicorn --factory ledger_gateway.api.main:create_app

    Raises:
        NotConfiguredError: JWT_SECRET is missing
    """
    settings = settings or get_settings()

    # Setup structured logging
    setup_logging(settings.log_level, settings.service_name)

    # Refuse to start without a signing secret
    try:
        token_signer = TokenSigner(
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            ttl_seconds=settings.token_ttl_seconds,
        )
    except NotConfiguredError:
        logging.critical("JWT_SECRET is not set; refusing to start")
        raise

    engine = build_engine(settings)
    session_factory = build_session_factory(engine)
    if settings.auto_create_schema:
        init_db(engine, session_factory)

    app = FastAPI(
        title="Ledger Gateway",
        description="Personal finance ledger and dashboard reporting service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.token_signer = token_signer

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(auth.router, prefix="/auth", tags=["auth"])
    app.include_router(feed.router, prefix="/feed", tags=["feed"])

    return app
