"""Asset lifecycle service: create, replace, delete and read image assets.

The service owns the ordering between the blob store and the metadata store:

* create writes the blob first and then inserts the row
* replace writes the new blob, repoints the row and commits, and only then
  removes the previous blob
* delete removes the blob and then the row, whatever the blob outcome was

Blob removal on replace/delete is best-effort. Its failures are logged and
never surface to the caller because the committed row is already correct.
Blobs written by a request that later fails are left in place and logged.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pixperfect.core.config import get_settings

from .exceptions import (
    BlobStoreError,
    InvalidParameterError,
    NotFoundOrUnauthorizedError,
    StorageUnavailableError,
)
from .models import (
    UNSET,
    Asset,
    AssetReplaceInput,
    DeleteOutcome,
    Overlay,
    StoredAsset,
    default_overlay_props,
    default_text_overlay,
)
from .repository import AssetRepository, BlobStore
from .transforms import TransformOperation, apply_transform

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSFORMED_FILE_NAME = "transformed.png"


@dataclass(slots=True)
class AssetLifecycleService:
    repository: AssetRepository
    blob_store: BlobStore
    operation_timeout: float = 30.0
    max_upload_bytes: Optional[int] = None

    @classmethod
    def with_session(cls, session: AsyncSession, blob_store: BlobStore) -> "AssetLifecycleService":
        # imported late: the SQL repository imports this package's models
        from pixperfect.infrastructure.database.repositories.asset_repository import SqlAssetRepository

        settings = get_settings()
        return cls(
            repository=SqlAssetRepository(session),
            blob_store=blob_store,
            operation_timeout=settings.storage.operation_timeout,
            max_upload_bytes=settings.storage.max_upload_bytes,
        )

    # ------------------------------------------------------------------ reads

    async def get(self, asset_id: int, owner_id: str) -> StoredAsset:
        asset = await self._bounded("metadata lookup", self.repository.get(asset_id, owner_id))
        if asset is None:
            raise NotFoundOrUnauthorizedError()
        return self._with_url(asset)

    async def list_assets(self, owner_id: str) -> list[StoredAsset]:
        assets = await self._bounded("metadata listing", self.repository.list_by_owner(owner_id))
        logger.info("Fetched %d images for owner %s", len(assets), owner_id)
        return [self._with_url(asset) for asset in assets]

    # ---------------------------------------------------------------- writes

    async def create(
        self,
        owner_id: str,
        data: Optional[bytes],
        file_name: Optional[str],
        *,
        overlay_props: Optional[Overlay] = None,
        text_overlay: Optional[Overlay] = None,
    ) -> StoredAsset:
        payload = self._validate_upload(data)
        key = await self._bounded("blob write", self.blob_store.put(payload, file_name))
        asset = await self._insert(owner_id, key, overlay_props, text_overlay)
        logger.info("Image uploaded: id=%s key=%s owner=%s", asset.id, key, owner_id)
        return self._with_url(asset)

    async def create_transformed(
        self,
        owner_id: str,
        data: Optional[bytes],
        operation: TransformOperation,
    ) -> StoredAsset:
        """Transform the upload and store the result with default overlays."""
        payload = self._validate_upload(data)
        logger.info("Starting transform %r for owner %s", operation, owner_id)
        output = await asyncio.to_thread(apply_transform, operation, payload)
        key = await self._bounded("blob write", self.blob_store.put(output, TRANSFORMED_FILE_NAME))
        # transformed geometry invalidates any previous overlay coordinates
        asset = await self._insert(owner_id, key, default_overlay_props(), default_text_overlay())
        logger.info("Image %s: id=%s key=%s owner=%s", operation.verb, asset.id, key, owner_id)
        return self._with_url(asset)

    async def replace(self, asset_id: int, owner_id: str, payload: AssetReplaceInput) -> StoredAsset:
        data = self._validate_upload(payload.data) if payload.data is not None else None

        current = await self._bounded("metadata lookup", self.repository.get(asset_id, owner_id))
        if current is None:
            logger.info("Replace rejected: image %s not found for owner %s", asset_id, owner_id)
            raise NotFoundOrUnauthorizedError()

        new_key = current.storage_key
        if data is not None:
            new_key = await self._bounded("blob write", self.blob_store.put(data, payload.file_name))

        overlay_props = current.overlay_props if payload.overlay_props is UNSET else payload.overlay_props
        text_overlay = current.text_overlay if payload.text_overlay is UNSET else payload.text_overlay

        try:
            updated = await self._bounded(
                "metadata update",
                self.repository.update(
                    asset_id,
                    owner_id,
                    storage_key=new_key,
                    overlay_props=overlay_props,
                    text_overlay=text_overlay,
                ),
            )
            if updated is not None:
                await self._bounded("metadata commit", self.repository.commit())
        except StorageUnavailableError:
            self._log_orphan(new_key, current.storage_key)
            raise
        if updated is None:
            # deleted concurrently between the lookup and the update
            self._log_orphan(new_key, current.storage_key)
            raise NotFoundOrUnauthorizedError()

        if new_key != current.storage_key:
            await self._discard(current.storage_key)
        logger.info("Image updated: id=%s key=%s owner=%s", asset_id, new_key, owner_id)
        return self._with_url(updated)

    async def delete(self, asset_id: int, owner_id: str) -> None:
        current = await self._bounded("metadata lookup", self.repository.get(asset_id, owner_id))
        if current is None:
            logger.info("Image not found for deletion: id=%s owner=%s", asset_id, owner_id)
            raise NotFoundOrUnauthorizedError()

        await self._discard(current.storage_key)

        removed = await self._bounded("metadata delete", self.repository.delete(asset_id, owner_id))
        if not removed:
            raise NotFoundOrUnauthorizedError()
        await self._bounded("metadata commit", self.repository.commit())
        logger.info("Image deleted: id=%s owner=%s", asset_id, owner_id)

    # --------------------------------------------------------------- helpers

    def _validate_upload(self, data: Optional[bytes]) -> bytes:
        if data is None:
            raise InvalidParameterError("No image file uploaded")
        if not data:
            raise InvalidParameterError("Uploaded file is empty")
        if self.max_upload_bytes is not None and len(data) > self.max_upload_bytes:
            raise InvalidParameterError("Uploaded file is too large")
        return data

    async def _insert(
        self,
        owner_id: str,
        key: str,
        overlay_props: Optional[Overlay],
        text_overlay: Optional[Overlay],
    ) -> Asset:
        try:
            asset = await self._bounded(
                "metadata insert",
                self.repository.insert(
                    owner_id=owner_id,
                    storage_key=key,
                    overlay_props=overlay_props,
                    text_overlay=text_overlay,
                ),
            )
            await self._bounded("metadata commit", self.repository.commit())
        except StorageUnavailableError:
            logger.error("Blob %s left orphaned after failed metadata insert", key)
            raise
        return asset

    async def _bounded(self, operation: str, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.operation_timeout)
        except asyncio.TimeoutError as exc:
            logger.error("%s timed out after %.1fs", operation, self.operation_timeout)
            raise StorageUnavailableError() from exc
        except (BlobStoreError, SQLAlchemyError) as exc:
            logger.error("%s failed: %s", operation, exc)
            raise StorageUnavailableError() from exc

    async def _discard(self, key: str) -> DeleteOutcome:
        """Best-effort removal of a blob that no row references any more."""
        try:
            outcome = await asyncio.wait_for(self.blob_store.delete(key), timeout=self.operation_timeout)
        except asyncio.TimeoutError:
            logger.error("Timed out deleting blob %s; it will linger", key)
            return DeleteOutcome.FAILED
        except BlobStoreError as exc:
            logger.error("Failed to delete blob %s: %s", key, exc)
            return DeleteOutcome.FAILED
        if outcome is DeleteOutcome.NOT_FOUND:
            logger.warning("Blob %s was already absent", key)
        elif outcome is DeleteOutcome.FAILED:
            logger.error("Failed to delete blob %s; it will linger", key)
        return outcome

    @staticmethod
    def _log_orphan(new_key: str, previous_key: str) -> None:
        if new_key != previous_key:
            logger.error("Blob %s left orphaned after failed metadata update", new_key)

    def _with_url(self, asset: Asset) -> StoredAsset:
        return StoredAsset(asset=asset, url=self.blob_store.resolve(asset.storage_key))
