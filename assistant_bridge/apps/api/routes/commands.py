"""Mattermost slash command route for ``/assistant connect|disconnect``."""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, status
from fastapi.responses import JSONResponse

from assistant_bridge.core.logging import get_logger
from assistant_bridge.services import ServiceContainer
from assistant_bridge.services.link_commands import execute_command

from ..dependencies import get_service_container, tokens_match

router = APIRouter()
logger = get_logger(__name__)

COMMAND_PATH = "/commands/assistant"


@router.post(COMMAND_PATH)
async def handle_assistant_command(
    services: Annotated[ServiceContainer, Depends(get_service_container)],
    token: Annotated[Optional[str], Form()] = None,
    user_id: Annotated[Optional[str], Form()] = None,
    text: Annotated[Optional[str], Form()] = None,
    command: Annotated[Optional[str], Form()] = None,
) -> JSONResponse:
    """Execute the slash command Mattermost forwards as a form-encoded POST."""
    if not tokens_match(token, services.settings.MATTERMOST_COMMAND_TOKEN):
        logger.warning("slash command rejected: invalid or unconfigured token")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    account_id = (user_id or "").strip()
    if not account_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing user_id")
    if services.identity_store is None:
        raise RuntimeError("IdentityStore has not been configured.")

    command_text = text if text is not None else (command or "")
    response = execute_command(services.identity_store, account_id, command_text)
    return JSONResponse(response.to_wire())


__all__ = ["router", "COMMAND_PATH"]
