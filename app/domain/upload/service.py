"""
Relay for the external image host (Cloudinary REST API).

Image bytes are never stored here: they are forwarded verbatim and the host's
public URL is handed back to the caller.
"""
from app import config
from app.exceptions import ExternalServiceError, ValidationError
from typing import Dict, Optional
import base64
import hashlib
import httpx
import logging
import time

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPE_PREFIX = 'image/'


def check_image(content_type: Optional[str], data: bytes, max_size: int = config.MAX_UPLOAD_SIZE) -> None:
    if not content_type or not content_type.startswith(ALLOWED_CONTENT_TYPE_PREFIX):
        raise ValidationError("Only image files are allowed")
    if not data:
        raise ValidationError("No image file provided")
    if len(data) > max_size:
        raise ValidationError(f"Image exceeds the {max_size // (1024 * 1024)}MB size limit")


class ImageHostClient:
    """Cloudinary upload/destroy client"""

    BASE_URL = "https://api.cloudinary.com/v1_1"

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str = config.UPLOAD_FOLDER,
        timeout: int = config.IMAGE_HOST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self.timeout = timeout
        self.transport = transport

    def sign(self, params: Dict[str, str]) -> str:
        """SHA-1 over the alphabetically sorted parameters followed by the API secret."""
        payload = "&".join(f"{key}={params[key]}" for key in sorted(params) if params[key] not in (None, ''))
        return hashlib.sha1(f"{payload}{self.api_secret}".encode('utf-8')).hexdigest()

    def _signed_params(self, **params) -> Dict[str, str]:
        params['timestamp'] = str(int(time.time()))
        params['signature'] = self.sign(params)
        params['api_key'] = self.api_key
        return params

    async def _post(self, action: str, data: Dict[str, str]) -> dict:
        if not (self.cloud_name and self.api_key and self.api_secret):
            raise ExternalServiceError("Image host is not configured")

        url = f"{self.BASE_URL}/{self.cloud_name}/image/{action}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(url, data=data, headers={'Accept': 'application/json'})
        except httpx.HTTPError as e:
            logger.error(f"Image host request failed ({action}): {e}")
            raise ExternalServiceError(str(e)) from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_error or 'error' in body:
            error = body.get('error')
            message = (error.get('message') if isinstance(error, dict) else error) or f"HTTP {response.status_code}"
            logger.error(f"Image host rejected {action}: {message}")
            raise ExternalServiceError(message)

        return body

    async def upload(self, data: bytes, content_type: str) -> Dict[str, str]:
        data_uri = f"data:{content_type};base64,{base64.b64encode(data).decode('ascii')}"
        params = self._signed_params(folder=self.folder)

        logger.info(f"Uploading {len(data)} bytes to image host folder '{self.folder}'")
        body = await self._post('upload', {**params, 'file': data_uri})

        return {
            'url': body.get('secure_url') or body.get('url'),
            'public_id': body.get('public_id')
        }

    async def destroy(self, public_id: str) -> None:
        qualified_id = public_id if public_id.startswith(f"{self.folder}/") else f"{self.folder}/{public_id}"
        params = self._signed_params(public_id=qualified_id)

        logger.info(f"Deleting '{qualified_id}' from image host")
        await self._post('destroy', params)


async def upload_image(client: ImageHostClient, content_type: Optional[str], data: bytes) -> Dict[str, str]:
    check_image(content_type, data)
    try:
        return await client.upload(data, content_type)
    except ExternalServiceError as e:
        raise ExternalServiceError(f"Failed to upload image: {e.message}") from e

async def delete_image(client: ImageHostClient, public_id: str) -> None:
    try:
        await client.destroy(public_id)
    except ExternalServiceError as e:
        raise ExternalServiceError(f"Failed to delete image: {e.message}") from e
