# briefboarder/services/replicate.py
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional

import httpx
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from ..core.config import Settings, get_settings
from .storage import ObjectStorage, StorageError, get_storage

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = {"succeeded", "failed", "canceled"}
POLL_INTERVAL_SECONDS = 1.5

CONTENT_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
}


class ReplicateError(RuntimeError):
    pass


class UnknownModelError(ValueError):
    pass


@dataclass(frozen=True)
class GenerationModel:
    replicate_id: str
    extension: str
    build_input: Callable[[str, str], Dict[str, Any]]  # (prompt, aspect_ratio)


@dataclass(frozen=True)
class EditingModel:
    replicate_id: str
    max_images: int
    # (prompt, image_inputs, output_format, aspect_ratio)
    build_input: Callable[[str, List[str], str, str], Dict[str, Any]]


@dataclass(frozen=True)
class UpscalingModel:
    replicate_id: str
    extension: str
    build_input: Callable[[str], Dict[str, Any]]  # (image_url)


@dataclass(frozen=True)
class StoredImage:
    image_url: str
    key: str
    size: int


IMAGE_GENERATION_MODELS: Dict[str, GenerationModel] = {
    "imagen-4-ultra": GenerationModel(
        replicate_id="google/imagen-4-ultra",
        extension="png",
        build_input=lambda prompt, aspect_ratio: {
            "prompt": prompt,
            "aspect_ratio": aspect_ratio,
            "output_format": "png",
            "safety_filter_level": "block_only_high",
        },
    ),
    "flux-pro-1-1": GenerationModel(
        replicate_id="black-forest-labs/flux-1.1-pro",
        extension="webp",
        build_input=lambda prompt, aspect_ratio: {
            "prompt": prompt,
            "aspect_ratio": aspect_ratio,
            "output_format": "webp",
            "output_quality": 80,
            "safety_tolerance": 2,
            "prompt_upsampling": True,
        },
    ),
    "flux-schnell": GenerationModel(
        replicate_id="black-forest-labs/flux-schnell",
        extension="webp",
        build_input=lambda prompt, aspect_ratio: {
            "prompt": prompt,
            "go_fast": True,
            "megapixels": "1",
            "num_outputs": 1,
            "aspect_ratio": aspect_ratio,
            "output_format": "webp",
            "output_quality": 80,
            "num_inference_steps": 4,
        },
    ),
}

IMAGE_EDITING_MODELS: Dict[str, EditingModel] = {
    "nano-banana": EditingModel(
        replicate_id="google/nano-banana",
        max_images=8,
        build_input=lambda prompt, image_inputs, output_format, aspect_ratio: {
            "prompt": prompt,
            "image_input": image_inputs,
            "aspect_ratio": aspect_ratio,
            "output_format": output_format,
        },
    ),
    "flux-kontext": EditingModel(
        replicate_id="black-forest-labs/flux-kontext-pro",
        max_images=1,
        build_input=lambda prompt, image_inputs, output_format, aspect_ratio: {
            "prompt": prompt,
            "input_image": image_inputs[0],
            "aspect_ratio": aspect_ratio,
            "output_format": output_format,
            "safety_tolerance": 2,
            "prompt_upsampling": False,
        },
    ),
}

IMAGE_UPSCALING_MODELS: Dict[str, UpscalingModel] = {
    "topaz-image-upscaler": UpscalingModel(
        replicate_id="topazlabs/image-upscale",
        extension="jpg",
        build_input=lambda image_url: {
            "image": image_url,
            "enhance_model": "Low Resolution V2",
            "output_format": "jpg",
            "upscale_factor": "4x",
            "face_enhancement": True,
            "subject_detection": "Foreground",
            "face_enhancement_strength": 0.8,
            "face_enhancement_creativity": 0.5,
        },
    ),
    "clarity-upscaler": UpscalingModel(
        replicate_id=(
            "philz1337x/clarity-upscaler:"
            "dfad41707589d68ecdccd1dfa600d55a208f9310748e44bfe35b4a6291453d5e"
        ),
        extension="png",
        build_input=lambda image_url: {
            "seed": 1337,
            "image": image_url,
            "prompt": "masterpiece, best quality, highres, <lora:more_details:0.5> <lora:SDXLrender_v2.0:1>",
            "dynamic": 6,
            "handfix": "disabled",
            "pattern": False,
            "sharpen": 0,
            "sd_model": "juggernaut_reborn.safetensors [338b85bc4f]",
            "scheduler": "DPM++ 3M SDE Karras",
            "creativity": 0.35,
            "lora_links": "",
            "downscaling": False,
            "resemblance": 0.6,
            "scale_factor": 2,
            "tiling_width": 112,
            "output_format": "png",
            "tiling_height": 144,
            "custom_sd_model": "",
            "negative_prompt": "(worst quality, low quality, normal quality:2) JuggernautNegative-neg",
            "num_inference_steps": 18,
            "downscaling_resolution": 768,
        },
    ),
}

BACKGROUND_REMOVAL_MODEL = "bria/remove-background"

DEFAULT_GENERATION_MODEL = "imagen-4-ultra"
DEFAULT_EDITING_MODEL = "nano-banana"
DEFAULT_UPSCALING_MODEL = "topaz-image-upscaler"


def extract_output_url(output: Any) -> str:
    """
    Predictions return either a URL, a list of URLs (flux-schnell,
    clarity-upscaler) or an object carrying `url`.
    """
    if isinstance(output, list):
        if not output:
            raise ReplicateError("Empty output list from Replicate API")
        output = output[0]
    if isinstance(output, dict):
        output = output.get("url")
    if not isinstance(output, str) or not output:
        raise ReplicateError("No image URL returned from Replicate")
    return output


def _is_retryable_create(exc: BaseException) -> bool:
    # not idempotent: retry only if the request never landed or was rate limited
    if isinstance(exc, (httpx.ConnectError, httpx.ConnectTimeout)):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code == 429
    return False


def _is_retryable_poll(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code == 429 or exc.response.status_code >= 500
    return False


class ReplicateClient:
    """
    Thin client for the Replicate predictions HTTP API.

    `run` creates a prediction with `Prefer: wait` and polls until it reaches
    a terminal status, returning the raw `output` field.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.api_key: Optional[str] = settings.REPLICATE_API_KEY
        self.base_url: str = settings.REPLICATE_BASE_URL.rstrip("/")
        self.timeout: int = settings.REPLICATE_TIMEOUT_SECONDS
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise ReplicateError("REPLICATE_API_KEY is not configured")
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Prefer": f"wait={min(self.timeout, 60)}",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers(),
            timeout=self.timeout,
            transport=self._transport,
        )

    @retry(
        wait=wait_exponential(multiplier=1, min=1, max=10),
        stop=stop_after_attempt(3),
        retry=retry_if_exception(_is_retryable_create),
        reraise=True,
    )
    async def _create(self, client: httpx.AsyncClient, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        resp = await client.post(path, json=body)
        resp.raise_for_status()
        return resp.json()

    @retry(
        wait=wait_exponential(multiplier=1, min=1, max=10),
        stop=stop_after_attempt(3),
        retry=retry_if_exception(_is_retryable_poll),
        reraise=True,
    )
    async def _get(self, client: httpx.AsyncClient, url: str) -> Dict[str, Any]:
        resp = await client.get(url)
        resp.raise_for_status()
        return resp.json()

    async def run(self, model_ref: str, input: Dict[str, Any]) -> Any:
        # "owner/name" runs the latest version; "owner/name:version" pins one
        if ":" in model_ref:
            path, body = "/predictions", {"version": model_ref.split(":", 1)[1], "input": input}
        else:
            path, body = f"/models/{model_ref}/predictions", {"input": input}

        async with self._client() as client:
            prediction = await self._create(client, path, body)
            deadline = asyncio.get_running_loop().time() + self.timeout

            while prediction.get("status") not in TERMINAL_STATUSES:
                if asyncio.get_running_loop().time() > deadline:
                    raise ReplicateError(
                        f"Prediction {prediction.get('id')} timed out after {self.timeout}s"
                    )
                await asyncio.sleep(POLL_INTERVAL_SECONDS)
                get_url = (prediction.get("urls") or {}).get("get") or f"/predictions/{prediction.get('id')}"
                prediction = await self._get(client, get_url)

        if prediction.get("status") != "succeeded":
            raise ReplicateError(
                f"Prediction {prediction.get('status')}: {prediction.get('error') or 'unknown error'}"
            )

        logger.info(
            "Replicate prediction %s succeeded", prediction.get("id"),
            extra={"model": model_ref, "step": "replicate_run"},
        )
        return prediction.get("output")


class ImageService:
    """Image model operations; every result is copied into our own bucket."""

    def __init__(self, client: ReplicateClient, storage: ObjectStorage) -> None:
        self.client = client
        self.storage = storage

    async def _run_and_store(
        self,
        *,
        verb: str,
        model_ref: str,
        input: Dict[str, Any],
        filename: str,
        folder: str,
        extension: str,
    ) -> StoredImage:
        try:
            output = await self.client.run(model_ref, input)
            replicate_url = extract_output_url(output)
            stored = await self.storage.upload_from_url(
                replicate_url,
                filename,
                folder=folder,
                content_type=CONTENT_TYPES.get(extension, f"image/{extension}"),
            )
        except ReplicateError as e:
            logger.error("Image %s failed: %s", verb, e, extra={"model": model_ref, "step": verb})
            raise ReplicateError(f"Failed to {verb} image: {e}") from e
        except (httpx.HTTPError, StorageError) as e:
            logger.exception("Image %s failed", verb, extra={"model": model_ref, "step": verb})
            raise ReplicateError(f"Failed to {verb} image: {e}") from e

        return StoredImage(image_url=stored.public_url, key=stored.key, size=stored.size)

    async def generate_image(
        self,
        prompt: str,
        *,
        model: str = DEFAULT_GENERATION_MODEL,
        aspect_ratio: str = "1:1",
        folder: str = "generated-images",
    ) -> StoredImage:
        config = IMAGE_GENERATION_MODELS.get(model)
        if config is None:
            raise UnknownModelError(f"Unknown model: {model}")

        return await self._run_and_store(
            verb="generate",
            model_ref=config.replicate_id,
            input=config.build_input(prompt, aspect_ratio),
            filename=f"{model}.{config.extension}",
            folder=folder,
            extension=config.extension,
        )

    async def edit_image(
        self,
        prompt: str,
        image_inputs: List[str],
        *,
        model: str = DEFAULT_EDITING_MODEL,
        output_format: str = "jpg",
        aspect_ratio: str | None = None,
        folder: str = "edited-images",
    ) -> StoredImage:
        config = IMAGE_EDITING_MODELS.get(model)
        if config is None:
            raise UnknownModelError(f"Unknown editing model: {model}")
        if not image_inputs:
            raise ValueError("At least one image input is required")
        if len(image_inputs) > config.max_images:
            raise ValueError(
                f"{model} supports maximum {config.max_images} image(s), "
                f"but {len(image_inputs)} provided"
            )

        return await self._run_and_store(
            verb="edit",
            model_ref=config.replicate_id,
            input=config.build_input(
                prompt, image_inputs, output_format, aspect_ratio or "match_input_image"
            ),
            filename=f"{model}.{output_format}",
            folder=folder,
            extension=output_format,
        )

    async def upscale_image(
        self,
        image_url: str,
        *,
        model: str = DEFAULT_UPSCALING_MODEL,
        folder: str = "upscaled-images",
    ) -> StoredImage:
        config = IMAGE_UPSCALING_MODELS.get(model)
        if config is None:
            raise UnknownModelError(f"Unknown upscaling model: {model}")

        return await self._run_and_store(
            verb="upscale",
            model_ref=config.replicate_id,
            input=config.build_input(image_url),
            filename=f"{model}.{config.extension}",
            folder=folder,
            extension=config.extension,
        )

    async def remove_background(
        self,
        image_url: str,
        *,
        folder: str = "background-removed",
    ) -> StoredImage:
        return await self._run_and_store(
            verb="remove background from",
            model_ref=BACKGROUND_REMOVAL_MODEL,
            input={
                "image": image_url,
                "content_moderation": False,
                "preserve_partial_alpha": False,
            },
            filename="bg-removed.png",
            folder=folder,
            extension="png",
        )


@lru_cache(maxsize=1)
def get_image_service() -> ImageService:
    return ImageService(ReplicateClient(get_settings()), get_storage())
