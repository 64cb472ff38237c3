"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from assistant_bridge.apps.api.middleware import CorrelationIdMiddleware
from assistant_bridge.core.logging import get_logger
from assistant_bridge.services import ServiceContainer
from assistant_bridge.services import runtime

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Register services at startup and close the chat client on shutdown."""
    logger.info("Initializing assistant bridge...")
    services = getattr(app.state, "services", None)
    if isinstance(services, ServiceContainer):
        runtime.set_services(services)
    try:
        yield
    finally:
        chat = services.chat if isinstance(services, ServiceContainer) else None
        aclose = getattr(chat, "aclose", None)
        if aclose is not None:
            await aclose()
        logger.info("assistant bridge stopped.")


def create_app(services: ServiceContainer | None = None) -> FastAPI:
    """Build the FastAPI application with configured routers."""
    if services is None:
        raise RuntimeError("Service container must be provided when creating the app.")
    app = FastAPI(lifespan=lifespan)
    app.state.services = services
    runtime.set_services(services)
    app.add_middleware(CorrelationIdMiddleware)

    # Import lazily to avoid potential circular imports when routers grow.
    from .routes import commands, health, webhooks  # pylint: disable=import-outside-toplevel

    app.include_router(health.router)
    app.include_router(webhooks.router)
    app.include_router(commands.router)
    return app


__all__ = ["create_app", "lifespan"]
