"""
Guestbook API Server
Create, list and delete guestbook entries backed by a single PostgreSQL table
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import ALLOWED_ORIGINS
from database.connection import (
    DatabaseUnavailableError,
    RetryPolicy,
    close_database,
    init_database,
)
from api.routes import health, guestbook
from utils.error_handling import setup_error_handling

logger = logging.getLogger(__name__)

def create_app(retry_policy: Optional[RetryPolicy] = None, pool_factory=None) -> FastAPI:
    """Build the FastAPI application; the pool is created when the app starts"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager"""
        kwargs = {"pool_factory": pool_factory} if pool_factory else {}
        result = await init_database(retry_policy, **kwargs)
        if not result.ready:
            raise DatabaseUnavailableError(
                f"Database unavailable after {result.attempts} attempts: {result.error}"
            )

        app.state.db_pool = result.pool
        try:
            yield
        finally:
            app.state.db_pool = None
            await close_database(result.pool)

    app = FastAPI(
        title="Guestbook API",
        description="Create, list and delete guestbook entries",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    setup_error_handling(app)

    app.include_router(health.router, prefix="/api", tags=["Health"])
    app.include_router(guestbook.router, prefix="/api/guestbook", tags=["Guestbook"])

    return app

# FastAPI app instance is exported for use by uvicorn
app = create_app()
