"""
Cloudflare image transformation URLs.

https://developers.cloudflare.com/images/transform-images/transform-via-url/

    transform_image_url("https://cdn.example.com/avatars/a.png", width=1080, height=1920, fit="cover")
    -> "https://cdn.example.com/cdn-cgi/image/width=1080,height=1920,fit=cover/avatars/a.png"
"""
from __future__ import annotations

import logging
from typing import Literal

from ..core.config import get_settings

logger = logging.getLogger(__name__)

ImageFit = Literal["scale-down", "contain", "cover", "crop", "pad"]
ImageFormat = Literal["auto", "webp", "avif", "json", "jpeg", "png"]


def transform_image_url(
    url: str,
    *,
    width: int | None = None,
    height: int | None = None,
    fit: ImageFit | None = None,
    quality: int | None = None,
    format: ImageFormat | None = None,
    cdn_endpoint: str | None = None,
) -> str:
    """
    Rewrite a CDN URL to request a transformed variant.

    URLs that are empty, off-CDN, or have no options are returned unchanged.
    """
    if not url:
        return url

    cdn = cdn_endpoint if cdn_endpoint is not None else get_settings().S3_PUBLIC_ENDPOINT
    if not cdn:
        logger.warning("S3_PUBLIC_ENDPOINT not set, returning original URL")
        return url

    cdn = cdn.rstrip("/")
    # Only transform URLs from our CDN
    if not url.startswith(cdn):
        return url

    params: list[str] = []
    if width:
        params.append(f"width={width}")
    if height:
        params.append(f"height={height}")
    if fit:
        params.append(f"fit={fit}")
    if quality:
        params.append(f"quality={quality}")
    if format:
        params.append(f"format={format}")

    if not params:
        return url

    path = url[len(cdn):]
    return f"{cdn}/cdn-cgi/image/{','.join(params)}{path}"


def transform_for_llm(url: str) -> str:
    """Max 1024px variant used for vision calls to save tokens."""
    return transform_image_url(url, width=1024, height=1024, fit="scale-down")


def transform_to_mobile_aspect(url: str, size: Literal["full", "half"] = "full") -> str:
    """9:16 (YouTube Shorts / mobile vertical); full is 1080x1920, half 540x960."""
    width, height = (1080, 1920) if size == "full" else (540, 960)
    return transform_image_url(url, width=width, height=height, fit="cover", format="auto")


def transform_to_square(url: str, size: int = 512) -> str:
    return transform_image_url(url, width=size, height=size, fit="cover", format="auto")


def optimize_image(url: str, quality: int = 85) -> str:
    return transform_image_url(url, quality=quality, format="auto", fit="scale-down")
