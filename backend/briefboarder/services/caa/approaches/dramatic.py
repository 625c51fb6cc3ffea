from __future__ import annotations

from ....schemas.caa import CAAContext, CAAResult
from ..llm_client import LLMClient
from .base import COPY_GUIDANCE, EDITING_GUIDANCE, CreativeApproach

DRAMATIC_TECHNIQUES = [
    "film noir lighting with hard shadows",
    "chiaroscuro inspired by Caravaggio",
    "high contrast street photography style",
    "cinematic wide-angle with deep blacks",
]


class DramaticApproach(CreativeApproach):
    """
    Bold B&W photography with cinematic lighting.

    A technique is drawn at random on every call so repeated prompts vary.
    """

    id = "dramatic"
    name = "Dramatic"
    description = "Bold B&W photography with cinematic lighting"

    def pick_technique(self) -> str:
        return self._rng.choice(DRAMATIC_TECHNIQUES)

    def get_image_style_guidance(self) -> str:
        return f"bold black and white photography with dramatic lighting. Use: {self.pick_technique()}"

    def get_copy_style_guidance(self) -> str:
        return "provocative, emotionally charged headline that stops the viewer and creates impact"

    def build_system_prompt(self, technique: str) -> str:
        return f"""You are using the DRAMATIC approach:
- Transform into dramatic black and white photography
- Apply this specific technique: {technique}
- Emphasize: strong contrast, moody atmosphere, powerful composition
- ALWAYS specify black and white unless user explicitly requests color

{EDITING_GUIDANCE}

{COPY_GUIDANCE}"""

    def execute(self, context: CAAContext, llm: LLMClient) -> CAAResult:
        return self._single_step(self.build_system_prompt(self.pick_technique()), context, llm)
