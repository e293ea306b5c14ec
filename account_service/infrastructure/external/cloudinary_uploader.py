"""Cloudinary upload client used for avatar and cover images."""
import asyncio
import hashlib
import logging
import time
from pathlib import Path
from typing import Callable, Dict, Optional

import httpx

from ...core.config import get_settings
from ...domain.ports.media_uploader import MediaUploader, MediaUploadResult
from ..http_client_factory import get_shared_http_client

logger = logging.getLogger(__name__)


def sign_upload_params(params: Dict[str, str], api_secret: str) -> str:
    """
    Compute the Cloudinary request signature.

    Parameters are sorted by name, joined as ``k=v`` pairs with ``&`` and the
    API secret is appended before hashing with SHA-1.
    """
    to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params) if params[key] != "")
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryMediaUploader(MediaUploader):
    """
    Uploads local files to Cloudinary through its REST API.

    The local temp file is always removed after an upload attempt, whether
    it succeeded or not.
    """

    UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/auto/upload"

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        client_factory: Callable[[], httpx.AsyncClient] = get_shared_http_client,
    ):
        settings = get_settings()
        self.cloud_name = cloud_name if cloud_name is not None else settings.cloudinary_cloud_name
        self.api_key = api_key if api_key is not None else settings.cloudinary_api_key
        self.api_secret = api_secret if api_secret is not None else settings.cloudinary_api_secret
        self._client_factory = client_factory

        if not (self.cloud_name and self.api_key and self.api_secret):
            logger.warning("Cloudinary credentials not configured; media uploads will fail")

    async def upload(self, local_path: Optional[str]) -> Optional[MediaUploadResult]:
        """
        Upload a local file.

        Args:
            local_path: Path of the temp file written by the HTTP layer

        Returns:
            MediaUploadResult with the durable URL, or None on any failure
        """
        if not local_path:
            return None

        path = Path(local_path)
        try:
            if not path.is_file():
                logger.warning(f"Upload skipped, file not found: {path.name}")
                return None
            if not (self.cloud_name and self.api_key and self.api_secret):
                return None
            return await self._send(path)
        finally:
            path.unlink(missing_ok=True)

    async def _send(self, path: Path) -> Optional[MediaUploadResult]:
        content = await asyncio.to_thread(path.read_bytes)

        params = {"timestamp": str(int(time.time()))}
        data = {
            **params,
            "api_key": self.api_key,
            "signature": sign_upload_params(params, self.api_secret),
        }

        client = self._client_factory()
        try:
            response = await client.post(
                self.UPLOAD_URL.format(cloud_name=self.cloud_name),
                data=data,
                files={"file": (path.name, content)},
            )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Cloudinary upload failed for {path.name}: {e}")
            return None
        except ValueError as e:
            logger.error(f"Cloudinary returned a non-JSON response for {path.name}: {e}")
            return None

        url = body.get("secure_url") or body.get("url")
        if not url:
            logger.error(f"Cloudinary response for {path.name} has no URL")
            return None

        logger.info(f"Uploaded {path.name} to Cloudinary")
        return MediaUploadResult(url=url, public_id=body.get("public_id", ""))
