"""SQLAlchemy implementation of the image asset repository."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from pixperfect.db.models import Image as ImageModel
from pixperfect.modules.assets.models import Asset, Overlay
from pixperfect.modules.assets.repository import AssetRepository


def _dump(value: Overlay | None) -> str | None:
    return None if value is None else json.dumps(value)


def _load(raw: str | None) -> Overlay | None:
    return None if raw is None else json.loads(raw)


class SqlAssetRepository(AssetRepository):
    """Asset repository backed by SQLAlchemy models; every query filters on the owner."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def insert(
        self,
        *,
        owner_id: str,
        storage_key: str,
        overlay_props: Overlay | None,
        text_overlay: Overlay | None,
    ) -> Asset:
        model = ImageModel(
            owner_id=owner_id,
            storage_key=storage_key,
            overlay_props=_dump(overlay_props),
            text_overlay=_dump(text_overlay),
            created_at=datetime.now(timezone.utc),
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def get(self, asset_id: int, owner_id: str) -> Asset | None:
        model = await self._get_model(asset_id, owner_id)
        return self._to_domain(model) if model else None

    async def list_by_owner(self, owner_id: str) -> Sequence[Asset]:
        stmt = select(ImageModel).where(ImageModel.owner_id == owner_id).order_by(ImageModel.id)
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def update(
        self,
        asset_id: int,
        owner_id: str,
        *,
        storage_key: str,
        overlay_props: Overlay | None,
        text_overlay: Overlay | None,
    ) -> Asset | None:
        model = await self._get_model(asset_id, owner_id)
        if model is None:
            return None
        model.storage_key = storage_key
        model.overlay_props = _dump(overlay_props)
        model.text_overlay = _dump(text_overlay)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def delete(self, asset_id: int, owner_id: str) -> bool:
        stmt = delete(ImageModel).where(ImageModel.id == asset_id, ImageModel.owner_id == owner_id)
        result = await self._session.execute(stmt)
        return result.rowcount > 0

    async def commit(self) -> None:
        await self._session.commit()

    async def _get_model(self, asset_id: int, owner_id: str) -> ImageModel | None:
        stmt = select(ImageModel).where(ImageModel.id == asset_id, ImageModel.owner_id == owner_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: ImageModel) -> Asset:
        return Asset(
            id=int(model.id),
            owner_id=model.owner_id,
            storage_key=model.storage_key,
            overlay_props=_load(model.overlay_props),
            text_overlay=_load(model.text_overlay),
            created_at=model.created_at,
        )
