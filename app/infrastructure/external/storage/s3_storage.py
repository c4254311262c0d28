"""S3-compatible object storage (Cloudflare R2, AWS S3, MinIO) for presigned uploads and batch deletes."""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.core.constants import OBJECT_STORE_DELETE_CEILING
from app.infrastructure.exceptions import StorageDeleteError, StoragePresignError
from app.infrastructure.external.storage.protocol import (
    BatchDeleteResult,
    ObjectDeleteError,
    PresignedPost,
)

logger = logging.getLogger(__name__)


class S3ObjectStore:
    """S3-compatible object store with presigned POST grants and batch deletes.

    Uses boto3 (sync) via asyncio.to_thread for async API. Path-style
    addressing so private URLs look like <endpoint>/<bucket>/<key>.
    """

    def __init__(
        self,
        bucket: str,
        region: str = "auto",
        endpoint_url: str | None = None,
        public_base_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        max_attempts: int = 3,
        client: Any | None = None,
    ) -> None:
        """Initialize S3 client.

        Args:
            bucket: Bucket name.
            region: Region ('auto' for R2).
            endpoint_url: Custom endpoint (R2/MinIO); None for AWS.
            public_base_url: Public CDN base used to build stored URLs.
            access_key: Optional; uses env/IAM if not set.
            secret_key: Optional.
            max_attempts: botocore retry attempts per request.
            client: Pre-built boto3 client (tests, DI).
        """
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url.rstrip("/") if endpoint_url else None
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        if client is not None:
            self._client = client
            return
        extra = {} if endpoint_url is None else {"endpoint_url": endpoint_url}
        self._client = boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            config=Config(
                signature_version="s3v4",
                s3={"addressing_style": "path"},
                retries={"max_attempts": max_attempts, "mode": "standard"},
            ),
            **extra,
        )

    def public_url(self, key: str) -> str:
        """Return public URL for key (CDN base if configured, else path-style endpoint URL)."""
        quoted = quote(key, safe="/")
        if self.public_base_url:
            return f"{self.public_base_url}/{quoted}"
        if self.endpoint_url:
            return f"{self.endpoint_url}/{self.bucket}/{quoted}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{quoted}"

    async def generate_presigned_post(
        self,
        key: str,
        content_type: str,
        conditions: list[Any],
        expires_in: int,
    ) -> PresignedPost:
        """Return presigned POST (url + fields) for key; Content-Type is a signed field."""
        def _presign() -> dict[str, Any]:
            return self._client.generate_presigned_post(
                Bucket=self.bucket,
                Key=key,
                Fields={"Content-Type": content_type},
                Conditions=conditions,
                ExpiresIn=expires_in,
            )

        try:
            response = await asyncio.to_thread(_presign)
        except (ClientError, BotoCoreError) as e:
            raise StoragePresignError(key, str(e)) from e
        return PresignedPost(url=response["url"], fields=dict(response["fields"]))

    async def delete_objects(self, keys: list[str]) -> BatchDeleteResult:
        """Delete keys with one DeleteObjects request (Quiet=False for per-key results)."""
        if len(keys) > OBJECT_STORE_DELETE_CEILING:
            raise ValueError(
                f"DeleteObjects accepts at most {OBJECT_STORE_DELETE_CEILING} keys, got {len(keys)}"
            )
        if not keys:
            return BatchDeleteResult()

        def _delete() -> dict[str, Any]:
            return self._client.delete_objects(
                Bucket=self.bucket,
                Delete={
                    "Objects": [{"Key": key} for key in keys],
                    "Quiet": False,
                },
            )

        try:
            response = await asyncio.to_thread(_delete)
        except (ClientError, BotoCoreError) as e:
            raise StorageDeleteError(list(keys), str(e)) from e

        deleted = [item["Key"] for item in response.get("Deleted") or [] if "Key" in item]
        errors = [
            ObjectDeleteError(
                key=item.get("Key", ""),
                code=item.get("Code", "Unknown"),
                message=item.get("Message", ""),
            )
            for item in response.get("Errors") or []
        ]
        logger.debug(
            "DeleteObjects %s: %s deleted, %s errors", self.bucket, len(deleted), len(errors)
        )
        return BatchDeleteResult(deleted=deleted, errors=errors)
