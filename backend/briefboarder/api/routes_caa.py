import logging
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException

from ..core.config import get_settings
from ..schemas.caa import ApproachOut, Asset, CAARequest, CAAResult, GenerateAdRequest, GeneratedAd
from ..schemas.media import DescribeImageOut, EnhanceBriefOut, EnhanceBriefRequest, ImageUrlRequest
from ..services.ad_generator import generate_ad
from ..services.assets import get_preset_assets
from ..services.caa.approaches import UnknownApproachError, get_approach, list_approaches
from ..services.caa.llm_client import LLMClient
from ..services.llm import describe_image, enhance_brief
from ..utils.image_transform import transform_for_llm
from .deps import verify_api_key

router = APIRouter(tags=["caa"])

logger = logging.getLogger(__name__)


@router.post("/caa", response_model=CAAResult, response_model_exclude_none=True)
def run_caa(
    payload: CAARequest,
    _: None = Depends(verify_api_key),
):
    context = payload.context
    max_images = get_settings().CAA_MAX_SELECTED_IMAGES

    if not (context.user_prompt or "").strip():
        raise HTTPException(status_code=400, detail="User prompt is required")
    if len(context.selected_images) > max_images:
        raise HTTPException(
            status_code=400, detail=f"Maximum {max_images} images can be selected"
        )

    request_id = str(uuid4())
    try:
        approach = get_approach(context.settings.approach)
        llm = LLMClient(context.settings.model)
        return approach.execute(context, llm)
    except UnknownApproachError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception(
            "CAA failed: %s", e,
            extra={"request_id": request_id, "approach": context.settings.approach},
        )
        raise HTTPException(status_code=500, detail=str(e) or "CAA processing failed")


@router.get("/caa/approaches", response_model=list[ApproachOut])
def get_approaches(_: None = Depends(verify_api_key)):
    return list_approaches()


@router.get("/assets", response_model=list[Asset])
def get_assets(_: None = Depends(verify_api_key)):
    return get_preset_assets()


@router.post("/generate-ad", response_model=GeneratedAd, response_model_exclude_none=True)
async def create_ad(
    payload: GenerateAdRequest,
    _: None = Depends(verify_api_key),
):
    if not payload.brief_name or not payload.approach:
        raise HTTPException(status_code=400, detail="briefName and approach are required")

    try:
        return await generate_ad(payload)
    except UnknownApproachError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Ad generation failed: %s", e, extra={"approach": payload.approach})
        raise HTTPException(status_code=500, detail=str(e) or "Ad generation failed")


@router.post("/enhance-brief", response_model=EnhanceBriefOut)
def enhance_brief_description(
    payload: EnhanceBriefRequest,
    _: None = Depends(verify_api_key),
):
    try:
        enhanced = enhance_brief(
            brief_name=payload.brief_name,
            brief_description=payload.brief_description,
        )
    except Exception as e:
        logger.exception("Enhance brief failed: %s", e)
        raise HTTPException(status_code=500, detail=str(e) or "Failed to enhance brief")

    # The name is never rewritten
    return EnhanceBriefOut(enhanced_name=payload.brief_name, enhanced_description=enhanced)


@router.post("/describe-image", response_model=DescribeImageOut)
def describe_image_route(
    payload: ImageUrlRequest,
    _: None = Depends(verify_api_key),
):
    try:
        description = describe_image(image_url=transform_for_llm(payload.image_url))
    except Exception as e:
        logger.exception("Describe image failed: %s", e)
        raise HTTPException(status_code=500, detail=str(e) or "Failed to describe image")

    return DescribeImageOut(description=description)
