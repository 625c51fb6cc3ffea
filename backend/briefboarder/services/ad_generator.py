# briefboarder/services/ad_generator.py
from __future__ import annotations

import asyncio
import logging
import random
from uuid import uuid4

from ..schemas.caa import AdConcept, GenerateAdRequest, GeneratedAd, TrickRef
from ..utils.image_transform import transform_image_url
from .caa.approaches import AdContext, get_approach
from .caa.llm_client import LLMClient
from .caa.tricks import get_random_trick
from .replicate import ImageService, StoredImage, get_image_service

logger = logging.getLogger(__name__)

DEFAULT_AD_ASPECT_RATIO = "9:16"
COMPOSITE_JPEG_QUALITY = 90


def _headline_lines(concept: AdConcept, typeface: str, *, label: str) -> list[str]:
    if not concept.headline:
        return []
    return [
        f'- {label}: "{concept.headline}"',
        f"- Use {typeface} typeface for the headline",
        "- Place headline prominently with excellent legibility and contrast",
    ]


def build_composite_prompt(concept: AdConcept, typeface: str, *, has_logo: bool) -> str:
    if has_logo:
        lines = [
            "Create a mobile advertisement layout:",
            "",
            "INPUT IMAGES:",
            "- First image: Background/main visual (use as-is, maintain its style and composition)",
            "- Second image: Logo (place this logo subtly in the bottom corner)",
            "",
            "LAYOUT REQUIREMENTS:",
            *_headline_lines(concept, typeface, label="Add headline text"),
            "- Place the logo from the second image subtly in the bottom corner",
            "- Maintain the overall mood and style of the background image",
            "- Ensure professional, polished appearance",
            "- DO NOT generate a new logo - use the exact logo from the second input image",
        ]
    else:
        lines = [
            "Create a mobile advertisement layout with:",
            *_headline_lines(concept, typeface, label="Headline text"),
            "- Maintain the overall mood and style of the background image",
            "- Ensure professional, polished appearance",
        ]
    return "\n".join(lines)


def _as_jpeg(url: str) -> str:
    # The editing model handles transparent PNG inputs badly
    return transform_image_url(url, format="jpeg", quality=COMPOSITE_JPEG_QUALITY)


def _result(image: StoredImage, concept: AdConcept, trick) -> GeneratedAd:
    return GeneratedAd(
        image_url=image.image_url,
        s3_key=image.key,
        headline=concept.headline,
        text_placement=concept.text_placement,
        trick=TrickRef(id=trick.id, name=trick.name),
        reasoning=concept.reasoning,
    )


async def generate_ad(
    options: GenerateAdRequest,
    *,
    image_service: ImageService | None = None,
    rng: random.Random | None = None,
) -> GeneratedAd:
    """
    Autonomous ad: trick -> concept -> background -> optional composite.

    Raises UnknownApproachError for a bad approach id; LLM and image model
    failures propagate as StructuredOutputError / ReplicateError.
    """
    request_id = str(uuid4())
    images = image_service or get_image_service()
    aspect_ratio = options.aspect_ratio or DEFAULT_AD_ASPECT_RATIO
    log_extra = {"request_id": request_id, "approach": options.approach}

    # 1. trick
    trick = get_random_trick(rng)
    logger.info("Selected advertising trick %s", trick.id, extra={**log_extra, "step": "ad_trick"})

    # 2. approach
    approach = get_approach(options.approach or "simple")
    logger.info("Selected approach %s", approach.id, extra={**log_extra, "step": "ad_approach"})

    # 3. llm
    llm = LLMClient(options.settings.caa_model)

    # 4. concept
    ad_context = AdContext(
        brief_name=options.brief_name or "",
        brief_description=options.brief_description,
        trick=trick,
        model=options.settings.caa_model,
        available_assets=list(options.available_assets),
        preferred_typeface=options.preferred_typeface,
        aspect_ratio=aspect_ratio,
    )
    concept = await asyncio.to_thread(approach.generate_autonomous_ad, ad_context, llm)
    logger.info(
        "Ad concept generated (%s)",
        concept.text_placement,
        extra={**log_extra, "model": llm.model_id, "step": "ad_concept"},
    )

    # 5. background
    background = await images.generate_image(
        concept.image_prompt,
        model=options.settings.image_generation_model,
        aspect_ratio=concept.aspect_ratio,
    )
    logger.info(
        "Background generated: %s",
        background.key,
        extra={**log_extra, "model": options.settings.image_generation_model, "step": "ad_background"},
    )

    # 6. no compositing needed
    if concept.text_placement in ("integrated", "none"):
        logger.info("No compositing needed", extra={**log_extra, "step": "ad_complete"})
        return _result(background, concept, trick)

    # 7. composite headline (and logo) onto the background
    logo = next((a for a in options.available_assets if a.name == "logo"), None)
    image_inputs = [_as_jpeg(background.image_url)]
    if logo:
        image_inputs.append(_as_jpeg(logo.url))

    final = await images.edit_image(
        build_composite_prompt(concept, options.preferred_typeface, has_logo=logo is not None),
        image_inputs,
        model=options.settings.image_editing_model,
        output_format="jpg",
        aspect_ratio=concept.aspect_ratio,
    )
    logger.info(
        "Final ad composited: %s",
        final.key,
        extra={**log_extra, "model": options.settings.image_editing_model, "step": "ad_composite"},
    )
    return _result(final, concept, trick)
