"""Blob store backed by a directory on the local filesystem."""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import quote

import aiofiles
import aiofiles.os

from pixperfect.modules.assets.exceptions import BlobStoreError
from pixperfect.modules.assets.models import DeleteOutcome

from .keys import generate_key

logger = logging.getLogger(__name__)


class LocalBlobStore:
    """Stores each blob as one file under ``root``.

    Files are created in exclusive mode, so a key collision fails loudly
    instead of replacing somebody else's image. Addresses are served by the
    application's static mount at ``public_path``.
    """

    def __init__(self, root: Path, public_path: str = "/uploads") -> None:
        self._root = Path(root)
        self._public_path = "/" + public_path.strip("/")

    @property
    def root(self) -> Path:
        return self._root

    def _path_for(self, key: str) -> Path:
        if not key or Path(key).name != key or key.startswith("."):
            raise BlobStoreError(f"Invalid storage key: {key!r}")
        return self._root / key

    async def put(self, data: bytes, suggested_name: str | None = None) -> str:
        key = generate_key(suggested_name)
        path = self._path_for(key)
        try:
            await aiofiles.os.makedirs(self._root, exist_ok=True)
            async with aiofiles.open(path, "xb") as handle:
                await handle.write(data)
        except FileExistsError as exc:
            raise BlobStoreError(f"Storage key collision: {key}") from exc
        except OSError as exc:
            await self._remove_partial(path)
            raise BlobStoreError(f"Failed to write blob {key}: {exc}") from exc
        logger.debug("Stored %d bytes at %s", len(data), path)
        return key

    def resolve(self, key: str) -> str:
        return f"{self._public_path}/{quote(key)}"

    async def read(self, key: str) -> bytes:
        try:
            async with aiofiles.open(self._path_for(key), "rb") as handle:
                return await handle.read()
        except OSError as exc:
            raise BlobStoreError(f"Failed to read blob {key}: {exc}") from exc

    async def delete(self, key: str) -> DeleteOutcome:
        try:
            await aiofiles.os.remove(self._path_for(key))
        except FileNotFoundError:
            logger.info("Blob %s already absent", key)
            return DeleteOutcome.NOT_FOUND
        except (OSError, BlobStoreError) as exc:
            logger.error("Failed to delete blob %s: %s", key, exc)
            return DeleteOutcome.FAILED
        return DeleteOutcome.DELETED

    @staticmethod
    async def _remove_partial(path: Path) -> None:
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            return
        except OSError as exc:
            logger.warning("Could not remove partial blob %s: %s", path, exc)
