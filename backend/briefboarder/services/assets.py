from __future__ import annotations

from typing import List

from ..core.config import get_settings
from ..schemas.caa import Asset


def get_preset_assets() -> List[Asset]:
    """Assets available to every brief, served from the public bucket."""
    base = (get_settings().S3_PUBLIC_ENDPOINT or "").rstrip("/")
    return [
        Asset(name="logo", label="Logo", url=f"{base}/logo.png", type="preset"),
    ]
