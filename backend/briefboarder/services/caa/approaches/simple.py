from __future__ import annotations

from ....schemas.caa import CAAContext, CAAResult
from ..llm_client import LLMClient
from .base import COPY_GUIDANCE, EDITING_GUIDANCE, CreativeApproach


class SimpleApproach(CreativeApproach):
    """Clean, accurate enhancement with minimal interpretation."""

    id = "simple"
    name = "Simple"
    description = "Clean, accurate enhancement with minimal interpretation"

    def get_image_style_guidance(self) -> str:
        return "clean, straightforward photography with clear composition and natural lighting"

    def get_copy_style_guidance(self) -> str:
        return "clear, accurate headline that communicates the core benefit without exaggeration"

    def build_system_prompt(self) -> str:
        return f"""You are using the SIMPLE approach:
- Enhance prompts for clarity and technical accuracy
- Stay true to the user's intent
- Add specific details about composition, lighting, and style
- Keep it straightforward - no dramatic reinterpretation

{EDITING_GUIDANCE}

{COPY_GUIDANCE}"""

    def execute(self, context: CAAContext, llm: LLMClient) -> CAAResult:
        return self._single_step(self.build_system_prompt(), context, llm)
