# briefboarder/schemas/caa.py
from typing import Literal

from pydantic import Field, field_validator

from .base import CamelModel

CAAAction = Literal["generate", "edit", "answer", "generate_and_note"]
TextPlacement = Literal["overlay", "integrated", "none"]
AspectRatio = Literal["1:1", "16:9", "9:16"]


class Asset(CamelModel):
    name: str  # internal identifier, e.g. "logo"
    label: str  # display name, e.g. "Company Logo"
    url: str
    type: Literal["preset", "custom"] = "custom"


class SelectedImage(CamelModel):
    id: str
    s3_url: str
    prompt: str | None = None
    source_type: str | None = None
    transformed_url: str  # <=1024px variant sent to the LLM


class SelectedPostit(CamelModel):
    id: str
    text: str = ""
    color: str = ""


class CAASettings(CamelModel):
    approach: str = "simple"
    model: str
    image_generation_model: str | None = None
    image_editing_model: str | None = None


class CAAContext(CamelModel):
    user_prompt: str | None = None
    brief_name: str = ""
    brief_description: str = ""
    selected_images: list[SelectedImage] = []
    selected_postits: list[SelectedPostit] = []
    available_assets: list[Asset] = []
    settings: CAASettings


class CAARequest(CamelModel):
    context: CAAContext


class CAAResponse(CamelModel):
    """Structured reply the LLM must produce for a CAA turn."""

    action: CAAAction = Field(
        description=(
            "The action to take: 'generate' for new images, 'edit' for modifying existing "
            "images, 'answer' for questions, 'generate_and_note' for image + explanation"
        )
    )
    enhanced_prompt: str | None = Field(
        default=None,
        description="Enhanced prompt for image generation or editing (required for generate/edit/generate_and_note)",
    )
    include_assets: list[str] | None = Field(
        default=None,
        description='Asset names to include when editing (e.g., ["logo", "brand-pattern"])',
    )
    note_text: str | None = Field(
        default=None,
        description="Text for post-it note (required for answer/generate_and_note)",
    )
    reasoning: str = Field(description="Brief explanation of your decision and enhancements")


class Postit(CamelModel):
    text: str


class CAAResult(CamelModel):
    action: CAAAction
    enhanced_prompt: str | None = None
    postit: Postit | None = None
    image_inputs: list[str] | None = None  # for editing, includes asset URLs
    include_assets: list[str] | None = None


class AdConceptResponse(CamelModel):
    """Structured reply the LLM must produce for an autonomous ad."""

    text_placement: TextPlacement = Field(description="How text should be handled in the ad")
    headline: str | None = Field(
        default=None,
        description="Headline text (required if textPlacement is 'overlay')",
    )
    image_prompt: str = Field(description="Visual description for image generation")
    reasoning: str = Field(description="Explanation of how this uses the advertising technique")


class AdConcept(AdConceptResponse):
    aspect_ratio: AspectRatio = "9:16"


class AdSettings(CamelModel):
    image_generation_model: str = "imagen-4-ultra"
    image_editing_model: str = "nano-banana"
    caa_model: str


class GenerateAdRequest(CamelModel):
    brief_name: str | None = None
    brief_description: str = ""
    approach: str | None = None
    available_assets: list[Asset] = []
    preferred_typeface: str = "Helvetica"
    aspect_ratio: AspectRatio | None = None
    settings: AdSettings

    @field_validator("brief_name", "approach", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v


class TrickRef(CamelModel):
    id: str
    name: str


class GeneratedAd(CamelModel):
    image_url: str  # final composited ad, or the background when no overlay was needed
    s3_key: str
    headline: str | None = None
    text_placement: TextPlacement
    trick: TrickRef
    reasoning: str


class ApproachOut(CamelModel):
    id: str
    name: str
    description: str
