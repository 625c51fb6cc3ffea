# briefboarder/schemas/brief.py
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .base import CamelModel


class BriefCreate(CamelModel):
    name: str | None = None
    description: str | None = None

    @model_validator(mode="after")
    def validate_name(self):
        name = (self.name or "").strip()
        if not name:
            raise ValueError("Name is required")
        self.name = name
        if self.description is not None and not self.description.strip():
            self.description = None
        return self


class BriefUpdate(CamelModel):
    """
    Partial update. Only fields present in the request body are applied;
    an explicit null clears the column.

    `canvasState` and `settings` are stored exactly as sent. Placements
    (`id, s3Url, s3Key, x, y, width, height, rotation, scaleX, scaleY` plus
    whatever else the board writes) are only checked to be objects.
    """

    name: str | None = None
    description: str | None = None
    canvas_state: dict[str, Any] | None = None
    settings: dict[str, Any] | None = None

    @field_validator("canvas_state")
    @classmethod
    def validate_canvas_state(cls, value):
        if value is None or "images" not in value:
            return value
        images = value["images"]
        if not isinstance(images, list) or not all(isinstance(i, dict) for i in images):
            raise ValueError("canvasState.images must be a list of objects")
        return value

    @model_validator(mode="after")
    def validate_name(self):
        if "name" in self.model_fields_set:
            name = (self.name or "").strip()
            if not name:
                raise ValueError("Name cannot be empty")
            self.name = name
        return self

    def changes(self) -> dict[str, Any]:
        return {
            field: getattr(self, field)
            for field in ("name", "description", "canvas_state", "settings")
            if field in self.model_fields_set
        }


class BriefOut(CamelModel):
    id: UUID
    name: str
    description: str | None = None
    canvas_state: dict | None = None
    settings: dict | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)
