"""Blob store backed by an S3-compatible object store (AWS S3, MinIO, ...)."""

from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import quote

import aioboto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from pixperfect.modules.assets.exceptions import BlobStoreError
from pixperfect.modules.assets.models import DeleteOutcome

from .keys import generate_key

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


@dataclass
class S3ClientConfig:
    """Connection tuning for the S3 client."""

    addressing_style: str = "path"
    connect_timeout: int = 10
    read_timeout: int = 60
    max_retries: int = 3
    max_pool_connections: int = 10

    def to_boto3_config(self) -> Config:
        return Config(
            signature_version="s3v4",
            s3={"addressing_style": self.addressing_style},
            retries={"max_attempts": self.max_retries, "mode": "standard"},
            connect_timeout=self.connect_timeout,
            read_timeout=self.read_timeout,
            max_pool_connections=self.max_pool_connections,
        )


class S3BlobStore:
    """Stores blobs as objects in one bucket.

    A client is opened per call so the store holds no connection state that
    concurrent requests could trip over. Addresses are plain object URLs,
    built from ``public_base_url`` when set, so they stay valid without
    further signing.
    """

    def __init__(
        self,
        bucket: str,
        *,
        prefix: str = "",
        region: str = "us-east-1",
        endpoint_url: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        public_base_url: Optional[str] = None,
        client_config: Optional[S3ClientConfig] = None,
        session: Any = None,
    ) -> None:
        if not bucket:
            raise ValueError("S3 blob store requires a bucket name")
        self._bucket = bucket
        self._prefix = prefix.strip("/") + "/" if prefix.strip("/") else ""
        self._region = region
        self._endpoint_url = endpoint_url
        self._access_key_id = access_key_id
        self._secret_access_key = secret_access_key
        self._public_base_url = public_base_url
        self._config = (client_config or S3ClientConfig()).to_boto3_config()
        self._session = session or aioboto3.Session()

    @property
    def bucket(self) -> str:
        return self._bucket

    def _client(self):
        return self._session.client(
            "s3",
            endpoint_url=self._endpoint_url,
            region_name=self._region,
            aws_access_key_id=self._access_key_id,
            aws_secret_access_key=self._secret_access_key,
            config=self._config,
        )

    async def put(self, data: bytes, suggested_name: str | None = None) -> str:
        key = generate_key(suggested_name, prefix=self._prefix)
        content_type = mimetypes.guess_type(key)[0] or "application/octet-stream"
        try:
            async with self._client() as client:
                # conditional write: refuse to replace an existing object
                await client.put_object(
                    Bucket=self._bucket,
                    Key=key,
                    Body=data,
                    ContentType=content_type,
                    IfNoneMatch="*",
                )
        except ClientError as exc:
            if _error_code(exc) == "PreconditionFailed":
                raise BlobStoreError(f"Storage key collision: {key}") from exc
            raise BlobStoreError(f"Failed to upload {key}: {exc}") from exc
        except BotoCoreError as exc:
            raise BlobStoreError(f"Failed to upload {key}: {exc}") from exc
        logger.debug("Uploaded %d bytes to s3://%s/%s", len(data), self._bucket, key)
        return key

    def resolve(self, key: str) -> str:
        if self._public_base_url:
            base = self._public_base_url.rstrip("/")
        elif self._endpoint_url:
            base = f"{self._endpoint_url.rstrip('/')}/{self._bucket}"
        else:
            base = f"https://{self._bucket}.s3.{self._region}.amazonaws.com"
        return f"{base}/{quote(key)}"

    async def read(self, key: str) -> bytes:
        try:
            async with self._client() as client:
                resp = await client.get_object(Bucket=self._bucket, Key=key)
                body = resp["Body"]
                try:
                    return await body.read()
                finally:
                    body.close()
        except (ClientError, BotoCoreError) as exc:
            raise BlobStoreError(f"Failed to read {key}: {exc}") from exc

    async def delete(self, key: str) -> DeleteOutcome:
        try:
            async with self._client() as client:
                # delete_object succeeds for missing keys, so probe first
                try:
                    await client.head_object(Bucket=self._bucket, Key=key)
                except ClientError as exc:
                    if _error_code(exc) in _NOT_FOUND_CODES:
                        logger.info("Object %s already absent from %s", key, self._bucket)
                        return DeleteOutcome.NOT_FOUND
                    raise
                await client.delete_object(Bucket=self._bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            logger.error("Failed to delete s3://%s/%s: %s", self._bucket, key, exc)
            return DeleteOutcome.FAILED
        return DeleteOutcome.DELETED


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))
