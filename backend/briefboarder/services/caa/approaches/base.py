# briefboarder/services/caa/approaches/base.py
from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List

from ....schemas.caa import (
    AdConcept,
    AdConceptResponse,
    AspectRatio,
    Asset,
    CAAContext,
    CAAResponse,
    CAAResult,
    CAASettings,
    Postit,
)
from ..llm_client import LLMClient
from ..tricks import AdvertisingTrick, format_trick

logger = logging.getLogger(__name__)

EDITING_GUIDANCE = """IMPORTANT FOR IMAGE EDITING:
When user has images selected and wants to EDIT them:
- Describe what should be ADDED or CHANGED, not the entire scene
- Example: "add bold red text saying 'SALE' in the top right corner"
- Example: "overlay a blue watermark logo in bottom left"
- Don't describe the existing image content - the AI can see it
- Focus ONLY on the modifications/additions"""

COPY_GUIDANCE = """IMPORTANT FOR TEXT/COPY:
If user asks to add specific text/copy to an image:
- Use action "edit" (since they have images selected)
- Put the actual text/copy in noteText field (creates a post-it for reference)
- In enhancedPrompt, describe ONLY the visual style/placement of text
- Example: noteText: "SUMMER SALE - 50% OFF", enhancedPrompt: "add bold red text saying 'SUMMER SALE - 50% OFF' in a yellow banner at the top"
- The post-it serves as a reference for the text content, while the image shows it visually"""

ASPECT_RATIO_LABELS = {
    "9:16": "vertical mobile (9:16)",
    "1:1": "square feed post (1:1)",
    "16:9": "horizontal banner (16:9)",
}


@dataclass
class AdContext:
    """Inputs for one autonomous ad concept."""

    brief_name: str
    brief_description: str
    trick: AdvertisingTrick
    model: str
    available_assets: List[Asset] = field(default_factory=list)
    preferred_typeface: str = "Helvetica"
    aspect_ratio: AspectRatio = "9:16"


class CreativeApproach(ABC):
    """
    A programmable creative workflow.

    `execute` may be a single structured LLM call or a multi-step chain; it
    always returns a CAAResult the canvas can act on. Subclasses that draw
    random variations take an optional `rng` so they can be made
    deterministic.
    """

    id: str
    name: str
    description: str

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    @abstractmethod
    def execute(self, context: CAAContext, llm: LLMClient) -> CAAResult:
        ...

    @abstractmethod
    def get_image_style_guidance(self) -> str:
        ...

    @abstractmethod
    def get_copy_style_guidance(self) -> str:
        ...

    def describe(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name, "description": self.description}

    def _single_step(self, system_prompt: str, context: CAAContext, llm: LLMClient) -> CAAResult:
        llm_response = llm.call_with_structured_output(
            system_prompt=system_prompt,
            user_prompt=context.user_prompt or "",
            context=context,
        )
        logger.info(
            "Approach %s chose action %s",
            self.id,
            llm_response.action,
            extra={"approach": self.id, "model": llm.model_id, "step": "caa_execute"},
        )
        return self.to_result(llm_response, context)

    @staticmethod
    def to_result(llm_response: CAAResponse, context: CAAContext) -> CAAResult:
        """Map the LLM's structured reply onto what the canvas consumes."""
        result = CAAResult(action=llm_response.action)

        if llm_response.enhanced_prompt:
            result.enhanced_prompt = llm_response.enhanced_prompt

        if llm_response.note_text:
            result.postit = Postit(text=llm_response.note_text)

        if llm_response.action == "edit" and llm_response.include_assets is not None:
            assets_by_name = {a.name: a for a in context.available_assets}
            asset_urls = [
                assets_by_name[name].url
                for name in llm_response.include_assets
                if name in assets_by_name and assets_by_name[name].url
            ]
            result.include_assets = list(llm_response.include_assets)
            result.image_inputs = [img.s3_url for img in context.selected_images] + asset_urls

        return result

    # ------------------------------------------------------------------
    # Autonomous ads
    # ------------------------------------------------------------------

    def build_ad_system_prompt(self, ad_context: AdContext) -> str:
        ratio_label = ASPECT_RATIO_LABELS.get(ad_context.aspect_ratio, ad_context.aspect_ratio)
        asset_names = ", ".join(a.name for a in ad_context.available_assets) or "none"

        return f"""You are an award-winning advertising creative director working in the {self.name.upper()} approach.

BRIEF:
- Name: {ad_context.brief_name}
- Description: {ad_context.brief_description or "No description provided"}

ADVERTISING TECHNIQUE (build the whole concept around it):
{format_trick(ad_context.trick)}

VISUAL STYLE:
{self.get_image_style_guidance()}

COPY STYLE:
{self.get_copy_style_guidance()}

FORMAT:
- {ratio_label} advertisement
- Preferred typeface for any headline: {ad_context.preferred_typeface}
- Brand assets available for compositing: {asset_names}

TEXT PLACEMENT - choose exactly one:
- "overlay": the headline is composited on top afterwards. Provide the headline and
  leave clean negative space for it in the imagePrompt. Do NOT put text in imagePrompt.
- "integrated": the text is part of the scene itself (a sign, a label, a screen).
  Write the exact headline inside imagePrompt and also return it as headline.
- "none": a purely visual ad with no words.

RULES:
- imagePrompt is a complete, concrete visual description an image model can render
- Never describe a logo in imagePrompt; logos are added during compositing
- reasoning explains in 1-2 sentences how the concept uses the technique"""

    def build_ad_user_prompt(self, ad_context: AdContext) -> str:
        return (
            f"Create one ad concept for the brief \"{ad_context.brief_name}\" using the "
            f"{ad_context.trick.name} technique."
        )

    def generate_autonomous_ad(self, ad_context: AdContext, llm: LLMClient) -> AdConcept:
        caa_context = CAAContext(
            user_prompt=self.build_ad_user_prompt(ad_context),
            brief_name=ad_context.brief_name,
            brief_description=ad_context.brief_description,
            available_assets=ad_context.available_assets,
            settings=CAASettings(approach=self.id, model=ad_context.model),
        )
        response = llm.call_with_structured_output(
            system_prompt=self.build_ad_system_prompt(ad_context),
            user_prompt=caa_context.user_prompt,
            context=caa_context,
            schema=AdConceptResponse,
            include_caa_preamble=False,
        )

        concept = AdConcept(**response.model_dump(), aspect_ratio=ad_context.aspect_ratio)
        if concept.text_placement == "overlay" and not (concept.headline or "").strip():
            logger.warning(
                "Overlay concept came back without a headline; treating as visual-only",
                extra={"approach": self.id, "step": "ad_concept"},
            )
            concept.text_placement = "none"
        return concept
