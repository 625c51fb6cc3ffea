from sqlalchemy import Column, String, Text, JSON, DateTime, Uuid
from datetime import datetime, timezone
import uuid
from ..core.db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def empty_canvas_state() -> dict:
    return {"images": []}


class Brief(Base):
    __tablename__ = "briefs"

    # Uuid renders as native UUID on Postgres and CHAR(32) elsewhere
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    canvas_state = Column(JSON, nullable=True, default=empty_canvas_state)  # {"images": [placement, ...]}
    settings = Column(JSON, nullable=True)  # {imageGenerationModel, imageEditingModel, ...}
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)

    def touch(self) -> None:
        self.updated_at = _utcnow()
