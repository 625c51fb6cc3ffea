from __future__ import annotations

from ....schemas.caa import CAAContext, CAAResult
from ..llm_client import LLMClient
from .base import CreativeApproach

BERNBACH_VISUAL_STYLES = [
    "simple product shot on plain background, 1960s advertising style",
    "honest documentary-style photography, minimal staging, authentic moment",
    "clean black and white composition with generous white space, vintage DDB aesthetic",
    "understated product photography that lets the subject speak for itself",
]


class BernbachApproach(CreativeApproach):
    """
    Honest, witty copy inspired by Bill Bernbach's DDB work.

    Visual: simple, iconic 1960s aesthetic (Think Small, Avis, Lemon).
    Copy: self-aware, conversational, limitations embraced as strengths.
    """

    id = "bernbach"
    name = "Bernbach"
    description = "Honest, witty copy with vintage 1960s aesthetic"

    def pick_visual_style(self) -> str:
        return self._rng.choice(BERNBACH_VISUAL_STYLES)

    def get_image_style_guidance(self) -> str:
        return (
            f"{self.pick_visual_style()}. Inspired by 1960s Volkswagen and Avis ads - simple, "
            "iconic, minimal staging, authentic moments. Not overly polished."
        )

    def get_copy_style_guidance(self) -> str:
        return (
            "witty, self-aware headline that makes you smile - honesty over hype, embrace "
            "limitations as strengths, conversational tone. Think 'Think Small' or 'We Try "
            "Harder' - undermine expectations with charm."
        )

    def build_system_prompt(self, visual_style: str) -> str:
        return f"""You are using the BERNBACH approach (inspired by Bill Bernbach's legendary DDB work):

VISUAL STYLE:
- {visual_style}
- Reference: 1960s Volkswagen "Think Small", Avis "We Try Harder", "Lemon" ads
- Simple, iconic imagery - let the product/subject speak for itself
- Clean composition with generous negative space
- Authentic, not overly polished - documentary feel
- Often black and white or muted vintage colors

COPY STYLE:
- Witty, self-aware, conversational
- Honesty over hype - embrace limitations as strengths
- Make them smile while making your point
- Undermine expectations with charm
- Examples: "Think Small" (when everyone else said big), "We Try Harder" (admitting you're #2), "Lemon" (calling out a defect)

IMPORTANT FOR IMAGE EDITING:
When user has images selected and wants to EDIT them:
- Describe what should be ADDED or CHANGED, not the entire scene
- Example: "add simple bold text saying 'SALE' in Helvetica, centered"
- Example: "overlay a small logo in bottom corner, minimal and understated"
- Don't describe the existing image content - the AI can see it
- Focus ONLY on the modifications/additions
- Keep edits simple and iconic, in line with 1960s DDB aesthetic

IMPORTANT FOR TEXT/COPY:
If user asks to add specific text/copy to an image:
- Use action "edit" (since they have images selected)
- Put the actual text/copy in noteText field (creates a post-it for reference)
- In enhancedPrompt, describe ONLY the visual style/placement of text
- Example: noteText: "Think Small", enhancedPrompt: "add simple bold text saying 'Think Small' in clean Helvetica typeface, centered at bottom with generous white space"
- The post-it serves as a reference for the text content, while the image shows it visually"""

    def execute(self, context: CAAContext, llm: LLMClient) -> CAAResult:
        return self._single_step(self.build_system_prompt(self.pick_visual_style()), context, llm)
