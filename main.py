"""Top-level ASGI entrypoint: ``uvicorn main:app``."""

from assistant_bridge.api_factory import create_app

app = create_app()
