"""
Interactions Webhook Receiver

FastAPI router that hands the raw request to the ResponseCoordinator
and maps its tagged Reply onto HTTP.
No dispatch logic here. Pure transport.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status

from config import Config

from .coordinator import RawRequest, RejectionReason, Reply, ResponseCoordinator, ResponseMode

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/interactions", tags=["Interactions"])

_STATUS_BY_REJECTION = {
    RejectionReason.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    RejectionReason.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
}


def get_coordinator() -> ResponseCoordinator:
    """Process-wide coordinator built by the bootstrap."""
    from infra.bootstrap import bootstrap_interactions

    return bootstrap_interactions().coordinator


def _to_http(reply: Reply) -> dict[str, Any]:
    if reply.is_ok:
        return reply.body
    raise HTTPException(status_code=_STATUS_BY_REJECTION[reply.rejection], detail=reply.detail)


async def _raw_request(request: Request) -> RawRequest:
    # Signature covers the exact bytes, so never let FastAPI parse the body first
    return RawRequest(headers=request.headers, body=await request.body())


@router.post("")
async def interactions_endpoint(
    request: Request,
    coordinator: ResponseCoordinator = Depends(get_coordinator),
) -> dict[str, Any]:
    """
    Receive an interaction using the configured response mode.

    Returns:
        PONG for handshakes, otherwise the immediate or deferred reply body

    Raises:
        HTTPException(401): Missing or invalid signature
        HTTPException(400): Body is not a valid interaction
    """
    reply = await coordinator.handle(await _raw_request(request), ResponseMode(Config.RESPONSE_MODE))
    return _to_http(reply)


@router.post("/immediate")
async def interactions_immediate(
    request: Request,
    coordinator: ResponseCoordinator = Depends(get_coordinator),
) -> dict[str, Any]:
    """Run the command handler inline and reply with its content."""
    reply = await coordinator.handle_immediate(await _raw_request(request))
    return _to_http(reply)


@router.post("/deferred")
async def interactions_deferred(
    request: Request,
    coordinator: ResponseCoordinator = Depends(get_coordinator),
) -> dict[str, Any]:
    """Acknowledge now; the handler result arrives as a follow-up message."""
    reply = await coordinator.handle_deferred(await _raw_request(request))
    return _to_http(reply)
