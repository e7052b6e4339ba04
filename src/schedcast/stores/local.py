"""Filesystem blob store for snapshot bodies."""

import asyncio
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from ..config import settings
from ..errors import StoreError
from .base import BlobStore

logger = logging.getLogger(__name__)


class LocalBlobStore(BlobStore):
    """
    Stores objects as files under ``<root>/<bucket>/``.

    Writes go through a temporary file and ``os.replace`` so a reader never
    sees a partially written snapshot. There are no HTTP headers on disk, so
    ``cache_control`` and ``content_type`` are accepted but not recorded.
    """

    def __init__(self, root: Optional[Path] = None, bucket: Optional[str] = None):
        self.root = Path(root or settings.blob_root)
        self.bucket = bucket or settings.storage_bucket

    def _resolve(self, path: str) -> Path:
        base = (self.root / self.bucket).resolve()
        target = (base / path).resolve()
        if target == base or base not in target.parents:
            raise StoreError(f"Invalid object path: {path!r}")
        return target

    async def remove(self, path: str) -> None:
        target = self._resolve(path)
        try:
            await asyncio.to_thread(target.unlink, missing_ok=True)
        except OSError as e:
            raise StoreError(f"Could not remove {path}: {e}") from e

    async def upload(
        self,
        path: str,
        body: str,
        cache_control: str = "60",
        overwrite: bool = False,
        content_type: str = "text/html",
    ) -> None:
        target = self._resolve(path)
        try:
            await asyncio.to_thread(self._write, target, body, overwrite)
        except FileExistsError as e:
            raise StoreError(f"Object already exists: {path}") from e
        except OSError as e:
            raise StoreError(f"Upload of {path} failed: {e}") from e
        logger.debug(f"Stored {len(body)} chars at {target}")

    def _write(self, target: Path, body: str, overwrite: bool) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        if not overwrite and target.exists():
            raise FileExistsError(str(target))

        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=".upload-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(body)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    async def download(self, path: str) -> Optional[str]:
        target = self._resolve(path)
        try:
            return await asyncio.to_thread(target.read_text, encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StoreError(f"Download of {path} failed: {e}") from e
