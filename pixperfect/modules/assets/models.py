"""Domain models for image assets."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional


Overlay = dict[str, Any]


def default_overlay_props() -> Overlay:
    return {"x": 50, "y": 50, "scale": 1, "opacity": 1.0, "dragging": False}


def default_text_overlay() -> Overlay:
    return {
        "content": "",
        "font": "Arial",
        "size": 20,
        "color": "#ffffff",
        "x": 50,
        "y": 50,
        "opacity": 1.0,
        "dragging": False,
    }


@dataclass(slots=True)
class Asset:
    id: int
    owner_id: str
    storage_key: str
    overlay_props: Optional[Overlay]
    text_overlay: Optional[Overlay]
    created_at: datetime


@dataclass(slots=True)
class StoredAsset:
    """An asset together with the address a viewer can fetch its bytes from."""

    asset: Asset
    url: str

    @property
    def id(self) -> int:
        return self.asset.id

    @property
    def storage_key(self) -> str:
        return self.asset.storage_key


class DeleteOutcome(str, Enum):
    DELETED = "deleted"
    NOT_FOUND = "not_found"
    FAILED = "failed"


# Sentinel used to differentiate between "not provided" and explicit None.
UNSET: Any = object()


@dataclass(slots=True)
class AssetReplaceInput:
    data: Optional[bytes] = None
    file_name: Optional[str] = None
    overlay_props: Optional[Overlay] | object = UNSET
    text_overlay: Optional[Overlay] | object = UNSET
