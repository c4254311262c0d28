"""Object store factory: builds the S3-compatible store and its deletion helpers from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.infrastructure.exceptions import StorageNotConfiguredError
from app.infrastructure.external.storage.batch_deleter import BatchDeleter
from app.infrastructure.external.storage.key_extractor import KeyExtractor
from app.infrastructure.external.storage.protocol import ObjectStoreProtocol

if TYPE_CHECKING:
    from app.core.config import Settings


class StorageFactory:
    """Factory for object store instances based on configuration."""

    @staticmethod
    def create_object_store(settings: "Settings | None" = None) -> ObjectStoreProtocol:
        """Create the S3-compatible object store.

        Args:
            settings: Application settings; if None, uses get_settings().

        Raises:
            StorageNotConfiguredError: S3_BUCKET is missing.
        """
        from app.core.config import get_settings
        from app.infrastructure.external.storage.s3_storage import S3ObjectStore

        s = settings or get_settings()
        if not s.s3_bucket:
            raise StorageNotConfiguredError("S3_BUCKET")
        return S3ObjectStore(
            bucket=s.s3_bucket,
            region=s.s3_region,
            endpoint_url=s.s3_endpoint_url,
            public_base_url=s.s3_public_base_url,
            access_key=s.s3_access_key,
            secret_key=s.s3_secret_key.get_secret_value() if s.s3_secret_key else None,
            max_attempts=s.s3_max_attempts,
        )

    @staticmethod
    def create_key_extractor(settings: "Settings | None" = None) -> KeyExtractor:
        from app.core.config import get_settings

        s = settings or get_settings()
        return KeyExtractor(
            public_base_url=s.s3_public_base_url,
            endpoint_url=s.s3_endpoint_url,
            bucket=s.s3_bucket,
        )

    @classmethod
    def create_batch_deleter(
        cls,
        object_store: ObjectStoreProtocol,
        settings: "Settings | None" = None,
    ) -> BatchDeleter:
        """Create a BatchDeleter bound to object_store and the configured URL shapes."""
        from app.core.config import get_settings

        s = settings or get_settings()
        return BatchDeleter(
            object_store,
            cls.create_key_extractor(s),
            batch_size=s.media_delete_batch_size,
        )
