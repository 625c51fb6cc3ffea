import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from ..schemas.media import CollabAuthRequest
from ..services.collab import authorize_room
from .deps import verify_api_key

router = APIRouter(tags=["collab"])

logger = logging.getLogger(__name__)


@router.post("/liveblocks-auth")
def liveblocks_auth(
    payload: CollabAuthRequest,
    _: None = Depends(verify_api_key),
):
    try:
        result = authorize_room(payload.room)
    except Exception as e:
        logger.exception("Liveblocks auth failed: %s", e, extra={"step": "liveblocks_auth"})
        raise HTTPException(status_code=500, detail="Authentication failed")

    # Provider status and body go back verbatim
    return Response(content=result.body, status_code=result.status, media_type="application/json")
