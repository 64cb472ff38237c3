"""Tests for FastAPI app factory."""
# pylint: disable=missing-function-docstring

import asyncio

import pytest

from assistant_bridge.apps.api.app import create_app, lifespan
from assistant_bridge.bootstrap import build_default_service_container
from assistant_bridge.services import runtime


def test_create_app_has_routes(services):
    app = create_app(services)
    paths = {
        path
        for route in app.router.routes
        if (path := getattr(route, "path", getattr(route, "path_format", "")))
    }
    assert {"/", "/alive", "/webhook", "/commands/assistant"} <= paths
    assert app.state.services is services
    assert runtime.get_services() is services
    runtime.clear_services()


def test_create_app_requires_services():
    with pytest.raises(RuntimeError):
        create_app(None)


def test_lifespan_registers_services_and_closes_chat(services):
    closed: list[bool] = []

    async def _aclose() -> None:
        closed.append(True)

    services.chat.aclose = _aclose
    app = create_app(services)
    runtime.clear_services()

    async def _exercise() -> None:
        async with lifespan(app):
            assert runtime.get_services() is services

    asyncio.run(_exercise())
    assert closed == [True]
    runtime.clear_services()


def test_default_container_wires_production_adapters(settings):
    container = build_default_service_container(settings)

    assert container.identity_store is not None
    assert container.chat is not None
    assert container.intent_router is not None
    assert (settings.DATA_DIR / "links.json").exists()
    asyncio.run(container.chat.aclose())
