"""
Application entry point.
Run with:  uvicorn store_ratings.main:app --reload

A default admin account is seeded on startup while SEED_ADMIN is true
(see store_ratings/db/seeder.py).
"""
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from store_ratings.core.logging_config import configure_logging
from store_ratings.core.config import settings
from store_ratings.core.exceptions import register_exception_handlers
from store_ratings.api.v1.router import api_router
from store_ratings.db.database import Database
from store_ratings.db.seeder import seed_admin

configure_logging()


def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    *database* defaults to the file named by DATABASE_URL; tests pass their
    own handle pointing at a temporary file.
    """
    logger = logging.getLogger(__name__)
    logger.info("Starting FastAPI application setup")
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description=(
            "Store rating platform: admins manage users and stores, owners "
            "follow their store's ratings, users rate stores from 1 to 5."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.database = database or Database.from_settings()

    # ── Middleware ──────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Errors and routers ──────────────────────────────────────────────────
    register_exception_handlers(app)
    app.include_router(api_router)

    # ── Startup / shutdown events ───────────────────────────────────────────
    @app.on_event("startup")
    def on_startup() -> None:
        """Create the schema and the default admin account."""
        logger.info("Initializing database and seed data")
        app.state.database.open()
        if settings.SEED_ADMIN:
            seed_admin(app.state.database)

    @app.on_event("shutdown")
    def on_shutdown() -> None:
        app.state.database.close()

    return app


app = create_app()
