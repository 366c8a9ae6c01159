"""Asset lifecycle dependency providers."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pixperfect.core.container import get_container
from pixperfect.modules.assets import AssetLifecycleService
from pixperfect.modules.assets.repository import BlobStore

from .database import get_db_session


def get_blob_store() -> BlobStore:
    return get_container().blob_store


def get_asset_service(
    db: AsyncSession = Depends(get_db_session),
    blob_store: BlobStore = Depends(get_blob_store),
) -> AssetLifecycleService:
    return AssetLifecycleService.with_session(db, blob_store)


__all__ = [
    "get_asset_service",
    "get_blob_store",
]
