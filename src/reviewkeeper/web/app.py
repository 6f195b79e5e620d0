"""FastAPI application factory for Reviewkeeper.

Example usage:
    >>> from reviewkeeper.config import ReviewkeeperConfig
    >>> from reviewkeeper.web.app import create_app
    >>>
    >>> app = create_app(ReviewkeeperConfig())
    >>>
    >>> import uvicorn
    >>> uvicorn.run(app, host="0.0.0.0", port=8080)
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reviewkeeper import __version__
from reviewkeeper.assignment import ReviewerPicker
from reviewkeeper.config import ReviewkeeperConfig
from reviewkeeper.database.connection import get_engine, get_session_factory
from reviewkeeper.logging import get_logger
from reviewkeeper.web.errors import register_error_handlers
from reviewkeeper.web.middleware import RequestLoggingMiddleware
from reviewkeeper.web.routes import (
    create_health_router,
    create_pull_requests_router,
    create_teams_router,
    create_users_router,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the database engine on startup and dispose of it on shutdown.

    The engine and session factory are stored in ``app.state`` for the route
    dependencies. A session factory already present in ``app.state`` (set by
    tests) is left in place.
    """
    config: ReviewkeeperConfig = app.state.config

    logger.info("app_startup_begin", host=config.web.host, port=config.web.port)

    engine = get_engine(config.database)
    app.state.engine = engine
    if getattr(app.state, "session_factory", None) is None:
        app.state.session_factory = get_session_factory(engine)

    logger.info(
        "database_pool_initialized",
        pool_size=config.database.pool_size,
        max_overflow=config.database.max_overflow,
    )

    yield

    logger.info("app_shutdown_begin")
    await engine.dispose()
    logger.info("database_pool_disposed")


def create_app(config: ReviewkeeperConfig | None = None) -> FastAPI:
    """Create and configure the Reviewkeeper FastAPI application.

    Args:
        config: Optional ReviewkeeperConfig. If None, creates default config.

    Returns:
        Configured FastAPI application instance.
    """
    if config is None:
        config = ReviewkeeperConfig()

    app = FastAPI(
        title="Reviewkeeper",
        version=__version__,
        description="Pull request reviewer assignment service",
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.session_factory = None
    # One picker per process so a configured seed yields a reproducible sequence
    app.state.picker = ReviewerPicker(seed=config.assignment.random_seed)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.web.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    register_error_handlers(app)

    app.include_router(create_health_router())
    app.include_router(create_teams_router())
    app.include_router(create_users_router())
    app.include_router(create_pull_requests_router())

    logger.info(
        "app_created",
        cors_origins=config.web.cors_origins,
        version=__version__,
        reviewers_per_pull_request=config.assignment.reviewers_per_pull_request,
    )

    return app
