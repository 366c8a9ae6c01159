"""Asset domain specific exceptions.

Each error carries a ``reason`` that is stable enough for clients to branch on
and an HTTP status the interface layer uses when rendering the error payload.
"""

from __future__ import annotations


class AssetError(Exception):
    """Base class for asset lifecycle errors."""

    reason = "asset_error"
    status_code = 500
    default_message = "Asset operation failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class InvalidParameterError(AssetError):
    """Raised for bad transform arguments or a missing/empty upload."""

    reason = "invalid_parameter"
    status_code = 400
    default_message = "Invalid request parameter"


class NotFoundOrUnauthorizedError(AssetError):
    """Raised when an asset does not exist or belongs to someone else.

    The two cases share one error so that a caller cannot probe for asset ids
    owned by other accounts.
    """

    reason = "not_found"
    status_code = 404
    default_message = "Image not found"


class UnprocessableAssetError(AssetError):
    """Raised when the uploaded bytes cannot be decoded as an image."""

    reason = "unprocessable_asset"
    status_code = 500
    default_message = "Failed to process image"


class StorageUnavailableError(AssetError):
    """Raised when the blob store or metadata store fails or times out."""

    reason = "storage_unavailable"
    status_code = 500
    default_message = "Storage is unavailable"


class BlobStoreError(Exception):
    """Raised by blob store drivers when a write cannot be completed."""
