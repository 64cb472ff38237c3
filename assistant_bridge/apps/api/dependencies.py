"""Shared FastAPI dependencies for token validation and service access."""

import hmac
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, Request, status

from assistant_bridge.services import ServiceContainer


def get_service_container(request: Request) -> ServiceContainer:
    """Resolve the service container attached to the running app."""
    services = getattr(request.app.state, "services", None)
    if not isinstance(services, ServiceContainer):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Service container not configured",
        )
    return services


def _extract_token(authorization: Optional[str], x_admin_token: Optional[str]) -> Optional[str]:
    if authorization and authorization.lower().startswith("bearer "):
        return authorization.split(" ", 1)[1].strip()
    if x_admin_token:
        return x_admin_token.strip()
    return None


def tokens_match(provided: Optional[str], expected: Optional[str]) -> bool:
    """Constant-time comparison that fails closed when either side is missing."""
    if not provided or not expected:
        return False
    return hmac.compare_digest(provided, expected)


async def require_healthcheck_token(
    services: Annotated[ServiceContainer, Depends(get_service_container)],
    authorization: Annotated[Optional[str], Header(alias="Authorization")] = None,
    x_admin_token: Annotated[Optional[str], Header(alias="X-Admin-Token")] = None,
) -> None:
    """Token guard for the health check endpoint."""
    settings = services.settings
    if not settings.ENABLE_ADMIN_AUTH:
        return
    if not settings.HEALTHCHECK_API_TOKEN:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token not configured",
            headers={"WWW-Authenticate": "Bearer"},
        )
    provided = _extract_token(authorization, x_admin_token)
    if not provided:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not tokens_match(provided, settings.HEALTHCHECK_API_TOKEN):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


__all__ = ["get_service_container", "require_healthcheck_token", "tokens_match"]
