import logging
import re
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..models.brief import Brief, empty_canvas_state
from ..schemas.brief import BriefCreate, BriefOut, BriefUpdate
from .deps import verify_api_key

router = APIRouter(tags=["briefs"])

logger = logging.getLogger(__name__)

UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def _load_brief(db: Session, brief_id: str) -> Brief:
    # Anything that isn't a canonical UUID cannot name a brief
    if not UUID_RE.match(brief_id):
        raise HTTPException(status_code=404, detail="Brief not found")

    brief = db.query(Brief).filter(Brief.id == UUID(brief_id)).first()
    if not brief:
        raise HTTPException(status_code=404, detail="Brief not found")
    return brief


@router.get("/briefs", response_model=list[BriefOut])
def list_briefs(
    db: Session = Depends(get_db),
    _: None = Depends(verify_api_key),
):
    try:
        briefs = db.query(Brief).order_by(Brief.created_at.desc()).all()
    except Exception as e:
        logger.exception("Error fetching briefs: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch briefs")

    return [BriefOut.model_validate(b) for b in briefs]


@router.post("/briefs", response_model=BriefOut)
def create_brief(
    payload: BriefCreate,
    db: Session = Depends(get_db),
    _: None = Depends(verify_api_key),
):
    try:
        brief = Brief(
            name=payload.name,
            description=payload.description,
            canvas_state=empty_canvas_state(),
        )
        db.add(brief)
        db.commit()
        db.refresh(brief)
    except Exception as e:
        db.rollback()
        logger.exception("Error creating brief: %s", e)
        raise HTTPException(status_code=500, detail="Failed to create brief")

    logger.info("Brief created", extra={"brief_id": str(brief.id), "step": "create_brief"})
    return BriefOut.model_validate(brief)


@router.get("/briefs/{brief_id}", response_model=BriefOut)
def get_brief(
    brief_id: str,
    db: Session = Depends(get_db),
    _: None = Depends(verify_api_key),
):
    try:
        brief = _load_brief(db, brief_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error fetching brief: %s", e, extra={"brief_id": brief_id})
        raise HTTPException(status_code=500, detail="Failed to fetch brief")

    return BriefOut.model_validate(brief)


@router.patch("/briefs/{brief_id}", response_model=BriefOut)
def update_brief(
    brief_id: str,
    payload: BriefUpdate,
    db: Session = Depends(get_db),
    _: None = Depends(verify_api_key),
):
    """
    Partial update: only keys present in the body are replaced, each one
    wholesale. updated_at is bumped even for an empty body.
    """
    try:
        brief = _load_brief(db, brief_id)
        for field, value in payload.changes().items():
            setattr(brief, field, value)
        brief.touch()
        db.commit()
        db.refresh(brief)
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Error updating brief: %s", e, extra={"brief_id": brief_id})
        raise HTTPException(status_code=500, detail="Failed to update brief")

    return BriefOut.model_validate(brief)


@router.delete("/briefs/{brief_id}")
def delete_brief(
    brief_id: str,
    db: Session = Depends(get_db),
    _: None = Depends(verify_api_key),
):
    try:
        brief = _load_brief(db, brief_id)
        db.delete(brief)
        db.commit()
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.exception("Error deleting brief: %s", e, extra={"brief_id": brief_id})
        raise HTTPException(status_code=500, detail="Failed to delete brief")

    logger.info("Brief deleted", extra={"brief_id": brief_id, "step": "delete_brief"})
    return {"success": True}
