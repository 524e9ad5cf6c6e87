# COMPONENT: R2 / S3 OBJECT STORE GATEWAY
# REQUIREMENTS SATISFIED: durable asset storage, presigned direct uploads, asset deletion

"""
src/aws/s3_utils.py

Thin gateway over the boto3 S3 client, pointed at Cloudflare R2.

This module is the only place that talks to the object store SDK. It keeps
one client for the lifetime of the process, built from an immutable
StorageConfig, and translates SDK failures into the application's storage
errors so nothing above this layer needs to know about botocore.

Key features:
    - put / delete / presign_put / get wrappers with explicit error surfacing
    - Availability decided once at construction, never per call
    - Cache headers and content types passed through to object metadata
    - Bodies may be bytes or file objects, streamed to the backend

The client is stateless after construction and safe to share between
concurrent requests.
"""
from __future__ import annotations

import logging
from typing import BinaryIO, NamedTuple, Optional, Union

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from src.aws.config import StorageConfig
from src.errors import StorageReadError, StorageUnavailable, StorageWriteError

logger = logging.getLogger("media_lifecycle")

CACHE_CONTROL = "public, max-age=31536000, immutable"
PRESIGN_TTL_SECONDS = 3600
MAX_PRESIGN_TTL_SECONDS = 3600

Body = Union[bytes, BinaryIO]


class StoredObject(NamedTuple):
    body: bytes
    content_type: str


def _client(config: StorageConfig):
    """Create an S3 client for the configured R2 endpoint."""
    return boto3.client(
        "s3",
        region_name=config.region,
        endpoint_url=config.endpoint_url,
        aws_access_key_id=config.access_key_id,
        aws_secret_access_key=config.secret_access_key,
        config=Config(signature_version="s3v4"),
    )


def _error_code(exc: Exception) -> str:
    if isinstance(exc, ClientError):
        return str(exc.response.get("Error", {}).get("Code", ""))
    return ""


class R2Gateway:
    def __init__(self, config: StorageConfig, client=None):
        self._config = config
        self._available = config.is_configured
        self._s3 = None
        if self._available:
            self._s3 = client if client is not None else _client(config)
        else:
            logger.warning("R2 storage is not configured; uploads will be rejected")

    @property
    def public_base_url(self) -> str:
        return self._config.public_base_url

    @property
    def bucket(self) -> Optional[str]:
        return self._config.bucket_name

    def is_available(self) -> bool:
        return self._available

    def _require(self):
        if not self._available:
            raise StorageUnavailable(
                "Cloud storage is not configured. Please set up R2 environment variables."
            )
        return self._s3

    def put(self, key: str, body: Body, content_type: str) -> None:
        s3 = self._require()
        try:
            s3.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
                CacheControl=CACHE_CONTROL,
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("R2 put failed: key=%s error=%s", key, exc)
            raise StorageWriteError(f"Failed to store {key}: {exc}") from exc
        logger.info("R2 put: key=%s content_type=%s", key, content_type)

    def delete(self, key: str) -> None:
        s3 = self._require()
        try:
            s3.delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            logger.error("R2 delete failed: key=%s error=%s", key, exc)
            raise StorageWriteError(f"Failed to delete {key}: {exc}") from exc
        logger.info("R2 delete: key=%s", key)

    def presign_put(
        self,
        key: str,
        content_type: str,
        ttl_seconds: int = PRESIGN_TTL_SECONDS,
        content_length: Optional[int] = None,
    ) -> str:
        """
        Sign a single PUT for `key`. The signature pins the content type
        (and the length, when known); reuse is limited only by expiry.
        """
        if not 0 < ttl_seconds <= MAX_PRESIGN_TTL_SECONDS:
            raise ValueError(f"ttl_seconds must be in 1..{MAX_PRESIGN_TTL_SECONDS}")

        s3 = self._require()
        params = {"Bucket": self.bucket, "Key": key, "ContentType": content_type}
        if content_length is not None:
            params["ContentLength"] = content_length

        try:
            return s3.generate_presigned_url(
                "put_object",
                Params=params,
                ExpiresIn=ttl_seconds,
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("R2 presign failed: key=%s error=%s", key, exc)
            raise StorageWriteError(f"Failed to create upload URL for {key}: {exc}") from exc

    def get(self, key: str) -> Optional[StoredObject]:
        s3 = self._require()
        try:
            obj = s3.get_object(Bucket=self.bucket, Key=key)
            body = obj["Body"].read()
        except ClientError as exc:
            if _error_code(exc) in ("NoSuchKey", "404", "NotFound"):
                return None
            raise StorageReadError(f"Failed to read {key}: {exc}") from exc
        except BotoCoreError as exc:
            raise StorageReadError(f"Failed to read {key}: {exc}") from exc
        return StoredObject(body, obj.get("ContentType") or "application/octet-stream")
