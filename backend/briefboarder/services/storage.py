# briefboarder/services/storage.py
from __future__ import annotations

import asyncio
import logging
import mimetypes
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import PurePosixPath
from typing import Any

import boto3
import httpx
from botocore.exceptions import BotoCoreError, ClientError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..core.config import Settings, get_settings
from ..utils.slugs import sanitize_slug

logger = logging.getLogger(__name__)

DOWNLOAD_TIMEOUT_SECONDS = 60


class StorageError(RuntimeError):
    pass


@dataclass(frozen=True)
class StoredObject:
    key: str
    public_url: str
    size: int


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")


def safe_filename(filename: str) -> str:
    path = PurePosixPath(filename or "")
    stem = sanitize_slug(path.stem) or "file"
    suffix = sanitize_slug(path.suffix.lstrip("."))
    return f"{stem}.{suffix}" if suffix else stem


class ObjectStorage:
    """
    S3-compatible object storage (R2 / MinIO / S3).

    Keys are `<folder>/<timestamp>-<safe filename>`; public URLs are served
    from S3_PUBLIC_ENDPOINT so they can be run through image transforms.
    """

    def __init__(self, settings: Settings, client: Any | None = None) -> None:
        self.bucket = settings.S3_BUCKET
        self.public_endpoint = (settings.S3_PUBLIC_ENDPOINT or "").rstrip("/")
        self._client = client or boto3.client(
            "s3",
            endpoint_url=settings.S3_ENDPOINT,
            aws_access_key_id=settings.S3_ACCESS_KEY_ID,
            aws_secret_access_key=settings.S3_SECRET_ACCESS_KEY,
            region_name=settings.S3_REGION,
        )

    def public_url(self, key: str) -> str:
        if not self.public_endpoint:
            raise StorageError("S3_PUBLIC_ENDPOINT is not configured")
        return f"{self.public_endpoint}/{key}"

    def build_key(self, filename: str, folder: str) -> str:
        return f"{folder.strip('/')}/{_timestamp()}-{safe_filename(filename)}"

    def upload_bytes(self, data: bytes, key: str, content_type: str | None = None) -> StoredObject:
        public_url = self.public_url(key)
        content_type = content_type or mimetypes.guess_type(key)[0] or "application/octet-stream"
        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.exception("S3 upload failed for %s", key, extra={"step": "storage_upload"})
            raise StorageError(f"Failed to upload file: {e}") from e

        logger.info(
            "Uploaded %s (%d bytes)", key, len(data), extra={"step": "storage_upload"}
        )
        return StoredObject(key=key, public_url=public_url, size=len(data))

    def upload_file(
        self,
        data: bytes,
        filename: str,
        *,
        folder: str = "briefs",
        content_type: str | None = None,
    ) -> StoredObject:
        return self.upload_bytes(data, self.build_key(filename, folder), content_type)

    @retry(
        wait=wait_exponential(multiplier=1, min=1, max=10),
        stop=stop_after_attempt(3),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _download(self, url: str) -> bytes:
        async with httpx.AsyncClient(timeout=DOWNLOAD_TIMEOUT_SECONDS, follow_redirects=True) as client:
            resp = await client.get(url)
            resp.raise_for_status()
            return resp.content

    async def upload_from_url(
        self,
        url: str,
        filename: str,
        *,
        folder: str,
        content_type: str | None = None,
    ) -> StoredObject:
        """Copy a provider-hosted file (e.g. a Replicate output) into our bucket."""
        try:
            data = await self._download(url)
        except httpx.HTTPError as e:
            raise StorageError(f"Failed to download {url}: {e}") from e
        return await asyncio.to_thread(self.upload_file, data, filename, folder=folder, content_type=content_type)


@lru_cache(maxsize=1)
def get_storage() -> ObjectStorage:
    return ObjectStorage(get_settings())
