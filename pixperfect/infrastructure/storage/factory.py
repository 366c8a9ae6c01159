"""Build the configured blob store backend."""

from __future__ import annotations

from pixperfect.core.config import Settings
from pixperfect.modules.assets.repository import BlobStore

from .local import LocalBlobStore
from .s3 import S3BlobStore, S3ClientConfig


def build_blob_store(settings: Settings) -> BlobStore:
    storage = settings.storage
    if storage.backend == "s3":
        s3 = storage.s3
        return S3BlobStore(
            s3.bucket,
            prefix=s3.prefix,
            region=s3.region,
            endpoint_url=s3.endpoint_url,
            access_key_id=s3.access_key_id,
            secret_access_key=s3.secret_access_key,
            public_base_url=s3.public_base_url,
            client_config=S3ClientConfig(
                connect_timeout=s3.connect_timeout,
                read_timeout=s3.read_timeout,
                max_retries=s3.max_retries,
            ),
        )
    return LocalBlobStore(settings.upload_dir.resolve(), public_path=storage.local.public_path)
