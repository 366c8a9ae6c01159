"""Simple dependency container for wiring core services."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache

from pixperfect.core.config import Settings, get_settings
from pixperfect.infrastructure.database.session import get_engine
from pixperfect.infrastructure.storage import build_blob_store
from pixperfect.modules.assets.repository import BlobStore


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    blob_store: BlobStore = field(init=False)

    def init_infrastructure(self) -> None:
        """Ensure infrastructure singletons (database engine, blob store) are initialised."""
        get_engine()
        self.blob_store = build_blob_store(self.settings)


@lru_cache()
def get_container() -> ApplicationContainer:
    container = ApplicationContainer(settings=get_settings())
    container.init_infrastructure()
    return container


__all__ = ["ApplicationContainer", "get_container"]
