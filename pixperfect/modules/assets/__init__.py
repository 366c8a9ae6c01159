"""Image asset domain exports."""

from .exceptions import (
    AssetError,
    BlobStoreError,
    InvalidParameterError,
    NotFoundOrUnauthorizedError,
    StorageUnavailableError,
    UnprocessableAssetError,
)
from .models import UNSET, Asset, AssetReplaceInput, DeleteOutcome, StoredAsset
from .service import AssetLifecycleService
from .transforms import Mirror, MirrorAxis, Rotate, apply_transform, parse_mirror, parse_rotation

__all__ = [
    "Asset",
    "AssetError",
    "AssetLifecycleService",
    "AssetReplaceInput",
    "BlobStoreError",
    "DeleteOutcome",
    "InvalidParameterError",
    "Mirror",
    "MirrorAxis",
    "NotFoundOrUnauthorizedError",
    "Rotate",
    "StorageUnavailableError",
    "StoredAsset",
    "UNSET",
    "UnprocessableAssetError",
    "apply_transform",
    "parse_mirror",
    "parse_rotation",
]
