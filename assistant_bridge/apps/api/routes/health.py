"""Service info and liveness routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from assistant_bridge.core.exceptions import StorageError
from assistant_bridge.core.logging import get_logger
from assistant_bridge.services import ServiceContainer

from ..dependencies import get_service_container, require_healthcheck_token
from .commands import COMMAND_PATH
from .webhooks import WEBHOOK_PATH

router = APIRouter()
logger = get_logger(__name__)


@router.get("/")
def read_root() -> dict[str, str]:
    """Tell operators which URLs to configure on each side of the bridge."""
    return {
        "message": f"Assistant bridge is running. Configure POST {WEBHOOK_PATH} as fulfillment URL.",
        "fulfillment_url": WEBHOOK_PATH,
        "slash_command_url": COMMAND_PATH,
    }


@router.get("/alive", dependencies=[Depends(require_healthcheck_token)])
async def alive_check(
    services: Annotated[ServiceContainer, Depends(get_service_container)],
) -> JSONResponse:
    """Report liveness along with whether the account-link store is readable."""
    store = services.identity_store
    if store is None:
        return JSONResponse(
            {"status": "degraded", "link_store": "not configured"},
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    try:
        store.list_links()
    except StorageError as exc:
        logger.error("link store health check failed: %s", exc)
        return JSONResponse(
            {"status": "degraded", "link_store": "unavailable"},
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return JSONResponse({"status": "ok", "link_store": "ok"})


__all__ = ["router"]
