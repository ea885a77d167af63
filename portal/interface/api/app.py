"""FastAPI application factory."""

from dishka import AsyncContainer
from dishka.integrations.fastapi import setup_dishka
from fastapi import FastAPI

from portal.interface.api.routes import auth, health, views
from portal.util.di.container import create_container
from portal.util.observability import instrument_fastapi, instrument_httpx


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create the portal application.

    Logfire must already be configured: ``scripts/start_app.py`` does it
    in production and ``tests/conftest.py`` in tests.

    Args:
        container: DI container to serve requests from. Defaults to the
            production container built from the environment.
    """
    instrument_httpx()

    app = FastAPI(
        title="Steam Login Portal",
        description="Sign in with Steam: identity verification, user records and sessions",
        version="0.1.0",
    )
    instrument_fastapi(app)

    # Closing the container on shutdown disposes the database engine
    setup_dishka(container or create_container(), app)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(views.router)

    return app
