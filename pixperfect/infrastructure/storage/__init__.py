"""Blob store backends: local filesystem and S3-compatible object storage.

Both implement :class:`pixperfect.modules.assets.repository.BlobStore`
(``put``, ``resolve``, ``delete``) and are selected by ``storage.backend``.
"""

from .factory import build_blob_store
from .keys import generate_key, sanitize_filename
from .local import LocalBlobStore
from .s3 import S3BlobStore, S3ClientConfig

__all__ = [
    "LocalBlobStore",
    "S3BlobStore",
    "S3ClientConfig",
    "build_blob_store",
    "generate_key",
    "sanitize_filename",
]
