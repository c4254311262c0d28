"""Object storage: S3-compatible backend (Cloudflare R2) for memorial media.

StorageFactory builds the store from app.core.config. Uploads go straight
from the browser to the bucket with presigned POST grants; the service only
issues grants and deletes objects that are no longer referenced.

KeyExtractor maps stored URLs back to keys; BatchDeleter deletes them in
batches of at most 1000.
"""

from app.infrastructure.external.storage.batch_deleter import BatchDeleter, DeletionReport
from app.infrastructure.external.storage.factory import StorageFactory
from app.infrastructure.external.storage.key_extractor import KeyExtractor
from app.infrastructure.external.storage.protocol import (
    BatchDeleteResult,
    ObjectDeleteError,
    ObjectStoreProtocol,
    PresignedPost,
)

__all__ = [
    "BatchDeleteResult",
    "BatchDeleter",
    "DeletionReport",
    "KeyExtractor",
    "ObjectDeleteError",
    "ObjectStoreProtocol",
    "PresignedPost",
    "StorageFactory",
]
