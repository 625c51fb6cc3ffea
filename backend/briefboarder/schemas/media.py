# briefboarder/schemas/media.py
from pydantic import Field, field_validator, model_validator

from .base import CamelModel
from .caa import AspectRatio

MAX_PROMPT_LEN = 8000
MAX_BRIEF_DESCRIPTION_LEN = 20000


def _require_text(v: str | None, message: str) -> str:
    if not isinstance(v, str) or not v.strip():
        raise ValueError(message)
    return v


class GenerateImageRequest(CamelModel):
    prompt: str | None = Field(default=None, validate_default=True)
    model: str | None = None
    aspect_ratio: AspectRatio | None = None

    @field_validator("prompt", mode="before")
    @classmethod
    def validate_prompt(cls, v):
        v = _require_text(v, "Prompt is required")
        if len(v) > MAX_PROMPT_LEN:
            raise ValueError(f"Prompt must be at most {MAX_PROMPT_LEN} characters")
        return v


class EditImageRequest(CamelModel):
    prompt: str | None = Field(default=None, validate_default=True)
    image_inputs: list[str] | None = Field(default=None, validate_default=True)
    model: str | None = None

    @field_validator("prompt", mode="before")
    @classmethod
    def validate_prompt(cls, v):
        return _require_text(v, "Prompt is required")

    @field_validator("image_inputs", mode="before")
    @classmethod
    def validate_image_inputs(cls, v):
        if not isinstance(v, list) or not v:
            raise ValueError("At least one image input is required")
        return v


class ImageUrlRequest(CamelModel):
    image_url: str | None = Field(default=None, validate_default=True)

    @field_validator("image_url", mode="before")
    @classmethod
    def validate_image_url(cls, v):
        return _require_text(v, "Image URL is required")


class UpscaleImageRequest(ImageUrlRequest):
    model: str | None = None


class ImageResult(CamelModel):
    image_url: str
    key: str
    size: int


class UploadResult(CamelModel):
    s3_url: str
    s3_key: str
    size: int


class DescribeImageOut(CamelModel):
    description: str


class EnhanceBriefRequest(CamelModel):
    brief_name: str | None = None
    brief_description: str | None = None

    @model_validator(mode="after")
    def validate_any_present(self):
        if not (self.brief_name or "").strip() and not (self.brief_description or "").strip():
            raise ValueError("Brief name or description is required")
        if self.brief_description and len(self.brief_description) > MAX_BRIEF_DESCRIPTION_LEN:
            raise ValueError(
                f"Brief description must be at most {MAX_BRIEF_DESCRIPTION_LEN} characters"
            )
        return self


class EnhanceBriefOut(CamelModel):
    enhanced_name: str | None = None
    enhanced_description: str


class CollabAuthRequest(CamelModel):
    room: str | None = Field(default=None, validate_default=True)

    @field_validator("room", mode="before")
    @classmethod
    def validate_room(cls, v):
        return _require_text(v, "Room ID is required")
