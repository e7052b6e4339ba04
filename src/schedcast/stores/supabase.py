"""Supabase Storage blob store."""

import logging
from typing import Optional

import httpx

from ..config import settings
from ..errors import StoreError
from .base import BlobStore

logger = logging.getLogger(__name__)


class SupabaseBlobStore(BlobStore):
    """Blob store over the Supabase Storage HTTP API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        bucket: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        base_url = base_url or settings.supabase_url
        api_key = api_key or settings.supabase_key
        if not base_url or not api_key:
            raise ValueError("SUPABASE_URL and SUPABASE_KEY are required when BLOB_BACKEND is 'supabase'")

        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.bucket = bucket or settings.storage_bucket
        self.timeout = timeout or settings.store_timeout_seconds
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "apikey": self.api_key,
        }

    def _object_url(self, path: str = "") -> str:
        url = f"{self.base_url}/storage/v1/object/{self.bucket}"
        return f"{url}/{path}" if path else url

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def remove(self, path: str) -> None:
        try:
            async with self._client() as client:
                response = await client.request(
                    "DELETE",
                    self._object_url(),
                    headers=self._headers(),
                    json={"prefixes": [path]},
                )
        except httpx.HTTPError as e:
            raise StoreError(f"Could not remove {path}: {e}") from e

        # Deleting a missing object is fine
        if response.status_code in (400, 404):
            return
        if response.is_error:
            raise StoreError(f"Could not remove {path}: HTTP {response.status_code} {response.text}")

    async def upload(
        self,
        path: str,
        body: str,
        cache_control: str = "60",
        overwrite: bool = False,
        content_type: str = "text/html",
    ) -> None:
        headers = {
            **self._headers(),
            "cache-control": f"max-age={cache_control}",
            "content-type": content_type,
            "x-upsert": "true" if overwrite else "false",
        }
        try:
            async with self._client() as client:
                response = await client.post(
                    self._object_url(path),
                    headers=headers,
                    content=body.encode("utf-8"),
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise StoreError(
                f"Upload of {path} failed: HTTP {e.response.status_code} {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise StoreError(f"Upload of {path} failed: {e}") from e
        logger.debug(f"Uploaded {path} to bucket {self.bucket}")

    async def download(self, path: str) -> Optional[str]:
        try:
            async with self._client() as client:
                response = await client.get(self._object_url(path), headers=self._headers())
        except httpx.HTTPError as e:
            raise StoreError(f"Download of {path} failed: {e}") from e

        if response.status_code in (400, 404):
            return None
        if response.is_error:
            raise StoreError(f"Download of {path} failed: HTTP {response.status_code}")
        return response.text
