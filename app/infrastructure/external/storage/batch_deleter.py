"""Batched object-store deletion for memorial media garbage collection.

URLs are mapped to keys (KeyExtractor), deduplicated, split into batches of
at most 1000 keys and deleted with one DeleteObjects call per batch. A batch
that fails as a whole marks all of its keys failed; the remaining batches
still run. delete_all and delete_keys never raise.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from app.application.dtos.cleanup import DeletionReport
from app.core.constants import OBJECT_STORE_DELETE_CEILING
from app.infrastructure.exceptions import StorageException
from app.infrastructure.external.storage.key_extractor import KeyExtractor
from app.infrastructure.external.storage.protocol import ObjectStoreProtocol

logger = logging.getLogger(__name__)

# Deleting a key that is already gone is a success.
IDEMPOTENT_ERROR_CODES = frozenset({"NoSuchKey"})
# Recorded for keys of a batch that failed with a non-storage error.
UNKNOWN_ERROR_CODE = "Unknown"


def partition(keys: list[str], size: int) -> list[list[str]]:
    """Split keys into consecutive chunks of at most size."""
    if size < 1:
        raise ValueError("Batch size must be >= 1")
    return [keys[i : i + size] for i in range(0, len(keys), size)]


class BatchDeleter:
    """Deletes media objects referenced by URLs in bounded batches."""

    def __init__(
        self,
        object_store: ObjectStoreProtocol,
        key_extractor: KeyExtractor,
        batch_size: int = OBJECT_STORE_DELETE_CEILING,
    ) -> None:
        self._store = object_store
        self._extractor = key_extractor
        self._batch_size = min(max(batch_size, 1), OBJECT_STORE_DELETE_CEILING)

    def keys_for(self, urls: Iterable[str]) -> tuple[list[str], list[str]]:
        """Return (unique keys in first-seen order, urls that are not ours)."""
        keys: dict[str, None] = {}
        skipped: list[str] = []
        for url in urls:
            key = self._extractor.extract_key(url)
            if key is None:
                skipped.append(url)
            else:
                keys.setdefault(key, None)
        return list(keys), skipped

    async def delete_all(self, urls: Iterable[str]) -> DeletionReport:
        """Delete every object referenced by urls. Never raises.

        Args:
            urls: Media URLs (duplicates and foreign URLs allowed).

        Returns:
            DeletionReport; len(succeeded) + len(failed) equals the number of
            unique keys extracted.
        """
        keys, skipped = self.keys_for(urls)
        if skipped:
            logger.debug("Skipping %s URL(s) outside the media bucket", len(skipped))
        report = await self.delete_keys(keys)
        report.skipped.extend(skipped)
        return report

    async def delete_keys(self, keys: Iterable[str]) -> DeletionReport:
        """Delete keys directly (used to retry previously failed keys). Never raises."""
        unique = list(dict.fromkeys(k for k in keys if k))
        report = DeletionReport()
        if not unique:
            return report

        batches = partition(unique, self._batch_size)
        for index, batch in enumerate(batches, start=1):
            report.merge(await self._delete_batch(batch, index, len(batches)))

        if report.failed:
            logger.warning(
                "Media deletion finished with failures: %s deleted, %s failed",
                len(report.succeeded),
                len(report.failed),
            )
        else:
            logger.info("Deleted %s media object(s)", len(report.succeeded))
        return report

    async def _delete_batch(
        self, batch: list[str], index: int, count: int
    ) -> DeletionReport:
        report = DeletionReport()
        try:
            result = await self._store.delete_objects(batch)
        except StorageException as e:
            logger.error(
                "Media delete batch %s/%s failed (%s keys): %s; keys=%s",
                index,
                count,
                len(batch),
                e.details.get("reason", e.message),
                batch,
            )
            report.failed.extend(batch)
            report.errors.update({key: e.error_code for key in batch})
            return report
        except Exception:
            logger.exception(
                "Media delete batch %s/%s failed unexpectedly (%s keys); keys=%s",
                index,
                count,
                len(batch),
                batch,
            )
            report.failed.extend(batch)
            report.errors.update({key: UNKNOWN_ERROR_CODE for key in batch})
            return report

        failed: dict[str, str] = {}
        for error in result.errors:
            if error.code in IDEMPOTENT_ERROR_CODES:
                continue
            failed[error.key] = error.code
        for key in batch:
            if key in failed:
                report.failed.append(key)
            else:
                report.succeeded.append(key)
        report.errors.update(failed)
        if failed:
            logger.warning(
                "Media delete batch %s/%s: %s key(s) rejected: %s",
                index,
                count,
                len(failed),
                failed,
            )
        return report
