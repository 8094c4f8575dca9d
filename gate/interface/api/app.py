"""FastAPI application."""

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gate.interface.api.errors import UnhandledErrorMiddleware, register_error_handlers
from gate.interface.api.routes import auth, health
from gate.util.di.container import create_container, setup_di
from gate.util.observability import instrument_fastapi, instrument_httpx


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Logfire should be configured before calling this function; start_app.py
    does it in production.

    Args:
        container: DI container to use; the production container is built
            when omitted (tests pass a mock container)
    """
    instrument_httpx()

    app_instance = FastAPI(
        title="Gate Auth API",
        description="Operator login, registration and password reset for the dashboard",
        version="0.1.0",
    )

    instrument_fastapi(app_instance)

    # Added first so it runs inside CORSMiddleware
    app_instance.add_middleware(UnhandledErrorMiddleware)

    # Any origin and header: the endpoints carry no cookies and are called
    # from the dashboard SPA
    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["*"],
    )

    setup_di(app_instance, container or create_container())

    register_error_handlers(app_instance)

    app_instance.include_router(health.router)
    app_instance.include_router(auth.router)

    return app_instance
