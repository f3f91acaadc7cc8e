import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from event_intake.api.routers import health as health_router
from event_intake.api.routers import public as public_router
from event_intake.core.config import DATABASE_URL, STATIC_DIR
from event_intake.core.logging import logger
from event_intake.db.session import Database
from event_intake.services.registrations import FallbackStore, RegistrationService


def create_app(
    database: Optional[Database] = None,
    fallback: Optional[FallbackStore] = None,
    static_dir: str = STATIC_DIR,
) -> FastAPI:
    if database is None:
        database = Database(DATABASE_URL)

    app = FastAPI(title="Event Registration Intake")

    app.state.registrations = RegistrationService(database, fallback)
    app.state.static_dir = static_dir
    # Filled in by the launcher once a port is bound
    app.state.listen_port = None
    app.state.asset_rewritten = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(health_router.router)
    app.include_router(public_router.router)

    # Static frontend, after the API routes so they take precedence
    if os.path.isdir(static_dir):
        app.mount("/", StaticFiles(directory=static_dir), name="frontend")
    else:
        logger.warning("Static directory %s not found; front-end will 404.", static_dir)

    @app.on_event("startup")
    def _startup():
        # No-op if the launcher already kicked off the connection attempt.
        database.start()

    @app.on_event("shutdown")
    def _shutdown():
        database.dispose()

    return app


app = create_app()
