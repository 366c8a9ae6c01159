"""Repository and blob store protocols for image assets."""

from __future__ import annotations

from typing import Protocol, Sequence

from .models import Asset, DeleteOutcome, Overlay


class AssetRepository(Protocol):
    """Metadata store for assets. Every lookup is scoped by owner."""

    async def insert(
        self,
        *,
        owner_id: str,
        storage_key: str,
        overlay_props: Overlay | None,
        text_overlay: Overlay | None,
    ) -> Asset:
        ...

    async def get(self, asset_id: int, owner_id: str) -> Asset | None:
        ...

    async def list_by_owner(self, owner_id: str) -> Sequence[Asset]:
        ...

    async def update(
        self,
        asset_id: int,
        owner_id: str,
        *,
        storage_key: str,
        overlay_props: Overlay | None,
        text_overlay: Overlay | None,
    ) -> Asset | None:
        ...

    async def delete(self, asset_id: int, owner_id: str) -> bool:
        ...

    async def commit(self) -> None:
        ...


class BlobStore(Protocol):
    """Put/resolve/delete bytes under opaque keys."""

    async def put(self, data: bytes, suggested_name: str | None = None) -> str:
        ...

    def resolve(self, key: str) -> str:
        ...

    async def delete(self, key: str) -> DeleteOutcome:
        ...
