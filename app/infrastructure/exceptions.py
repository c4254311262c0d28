"""Infrastructure exceptions for object storage operations.

Storage errors extend MemorialException so presentation can map them
to HTTP responses consistently. Deletion failures are normally caught by
the batch deleter and only logged.
"""

from app.domain.exceptions import MemorialException


class StorageException(MemorialException):
    """Base exception for object-store operations."""


class StorageDeleteError(StorageException):
    """Batch deletion request failed as a whole (network, credentials, throttling)."""

    def __init__(self, keys: list[str], reason: str) -> None:
        super().__init__(
            f"Failed to delete {len(keys)} object(s)",
            "STORAGE_DELETE_ERROR",
            {"keys": keys, "reason": reason},
        )


class StoragePresignError(StorageException):
    """Presigned upload grant could not be generated."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(
            f"Failed to issue upload grant for: {key}",
            "STORAGE_PRESIGN_ERROR",
            {"key": key, "reason": reason},
        )


class StorageNotConfiguredError(StorageException):
    """Object store client is missing required configuration."""

    def __init__(self, setting: str) -> None:
        super().__init__(
            f"Object storage is not configured: {setting} is required",
            "STORAGE_NOT_CONFIGURED",
            {"setting": setting},
        )
