"""Assistant fulfillment webhook route."""

from __future__ import annotations

import json

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from assistant_bridge.core.exceptions import EnvelopeRejectedError
from assistant_bridge.core.logging import get_logger
from assistant_bridge.core.models import FulfillmentRequest, FulfillmentResponse
from assistant_bridge.services import ServiceContainer
from assistant_bridge.services.dispatcher import IntentDispatcher

router = APIRouter()
logger = get_logger(__name__)

WEBHOOK_PATH = "/webhook"


def _get_services(request: Request) -> ServiceContainer:
    services = getattr(request.app.state, "services", None)
    if not isinstance(services, ServiceContainer):
        raise RuntimeError("Service container is not configured on app.state.")
    return services


def _bad_request() -> Response:
    return Response(status_code=status.HTTP_400_BAD_REQUEST)


@router.post(WEBHOOK_PATH)
async def handle_fulfillment(request: Request) -> Response:
    """Decode a fulfillment request, dispatch it, and return the conversational reply."""
    services = _get_services(request)
    body = await request.body()
    try:
        fulfillment = FulfillmentRequest.model_validate(json.loads(body))
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.error("Invalid JSON received", exc_info=True)
        return _bad_request()
    except ValidationError as exc:
        logger.error("Fulfillment body does not match schema: %s", exc.errors())
        return _bad_request()

    try:
        result = await IntentDispatcher(services).dispatch(fulfillment.to_envelope())
    except EnvelopeRejectedError as exc:
        logger.warning("Rejected fulfillment request: %s", exc)
        return _bad_request()

    logger.info("dispatch finished in state %s", result.state.value)
    return JSONResponse(FulfillmentResponse.from_envelope(result.response).to_wire())


@router.api_route(WEBHOOK_PATH, methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"])
async def reject_non_post() -> Response:
    """Only POST carries fulfillment requests."""
    return _bad_request()


__all__ = ["router", "WEBHOOK_PATH"]
