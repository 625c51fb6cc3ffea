import asyncio
import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from ..schemas.media import (
    EditImageRequest,
    GenerateImageRequest,
    ImageResult,
    ImageUrlRequest,
    UpscaleImageRequest,
    UploadResult,
)
from ..services.replicate import (
    DEFAULT_EDITING_MODEL,
    DEFAULT_GENERATION_MODEL,
    DEFAULT_UPSCALING_MODEL,
    StoredImage,
    get_image_service,
)
from ..services.storage import get_storage
from .deps import verify_api_key

router = APIRouter(tags=["media"])

logger = logging.getLogger(__name__)


def _image_result(image: StoredImage) -> ImageResult:
    return ImageResult(image_url=image.image_url, key=image.key, size=image.size)


@router.post("/generate", response_model=ImageResult)
async def generate_image(
    payload: GenerateImageRequest,
    _: None = Depends(verify_api_key),
):
    model = payload.model or DEFAULT_GENERATION_MODEL
    try:
        image = await get_image_service().generate_image(
            payload.prompt,
            model=model,
            aspect_ratio=payload.aspect_ratio or "1:1",
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Image generation failed: %s", e, extra={"model": model})
        raise HTTPException(status_code=500, detail=str(e) or "Failed to generate image")

    return _image_result(image)


@router.post("/edit", response_model=ImageResult)
async def edit_image(
    payload: EditImageRequest,
    _: None = Depends(verify_api_key),
):
    model = payload.model or DEFAULT_EDITING_MODEL
    try:
        image = await get_image_service().edit_image(
            payload.prompt,
            payload.image_inputs,
            model=model,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Image editing failed: %s", e, extra={"model": model})
        raise HTTPException(status_code=500, detail=str(e) or "Failed to edit image")

    return _image_result(image)


@router.post("/upscale", response_model=ImageResult)
async def upscale_image(
    payload: UpscaleImageRequest,
    _: None = Depends(verify_api_key),
):
    model = payload.model or DEFAULT_UPSCALING_MODEL
    try:
        image = await get_image_service().upscale_image(payload.image_url, model=model)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Image upscaling failed: %s", e, extra={"model": model})
        raise HTTPException(status_code=500, detail=str(e) or "Failed to upscale image")

    return _image_result(image)


@router.post("/remove-background", response_model=ImageResult)
async def remove_background(
    payload: ImageUrlRequest,
    _: None = Depends(verify_api_key),
):
    try:
        image = await get_image_service().remove_background(payload.image_url)
    except Exception as e:
        logger.exception("Background removal failed: %s", e)
        raise HTTPException(status_code=500, detail=str(e) or "Failed to remove background")

    return _image_result(image)


@router.post("/upload", response_model=UploadResult)
async def upload_file(
    file: UploadFile | None = File(default=None),
    _: None = Depends(verify_api_key),
):
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided")

    try:
        data = await file.read()
        stored = await asyncio.to_thread(
            get_storage().upload_file,
            data,
            file.filename or "upload",
            folder="briefs",
            content_type=file.content_type,
        )
    except Exception as e:
        logger.exception("Upload failed: %s", e)
        raise HTTPException(status_code=500, detail=str(e) or "Failed to upload file")

    return UploadResult(s3_url=stored.public_url, s3_key=stored.key, size=stored.size)
