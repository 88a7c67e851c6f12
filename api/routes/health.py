"""Health check endpoints."""
from fastapi import APIRouter, Request

from api.schemas import envelope
from utils.date_helpers import get_current_utc

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Health check endpoint."""
    token_manager = getattr(request.app.state, "token_manager", None)
    expires_at = token_manager.token_expires_at if token_manager else None

    if expires_at is None:
        session = "none"
    elif expires_at > get_current_utc():
        session = "active"
    else:
        session = "expired"

    return envelope(success=True, data={"status": "ok", "tmsSession": session})
