"""BatchDeleter: batching, per-key outcomes and failure isolation."""

from unittest.mock import AsyncMock

import pytest

from app.infrastructure.exceptions import StorageDeleteError
from app.infrastructure.external.storage.batch_deleter import BatchDeleter, partition
from app.infrastructure.external.storage.key_extractor import KeyExtractor
from app.infrastructure.external.storage.protocol import BatchDeleteResult, ObjectDeleteError

BASE = "https://pub-xyz.r2.dev"


def _urls(n: int) -> list[str]:
    return [f"{BASE}/u1/gallery-image/{i}.jpg" for i in range(n)]


def _store(side_effect=None) -> AsyncMock:
    store = AsyncMock()
    if side_effect is None:
        store.delete_objects = AsyncMock(
            side_effect=lambda keys: BatchDeleteResult(deleted=list(keys))
        )
    else:
        store.delete_objects = AsyncMock(side_effect=side_effect)
    return store


def test_partition_sizes() -> None:
    chunks = partition(list(range(2500)), 1000)
    assert [len(c) for c in chunks] == [1000, 1000, 500]


def test_partition_rejects_zero() -> None:
    with pytest.raises(ValueError):
        partition(["a"], 0)


async def test_2500_urls_take_three_calls() -> None:
    store = _store()
    deleter = BatchDeleter(store, KeyExtractor(), batch_size=1000)

    report = await deleter.delete_all(_urls(2500))

    assert store.delete_objects.await_count == 3
    sizes = [len(call.args[0]) for call in store.delete_objects.await_args_list]
    assert sizes == [1000, 1000, 500]
    assert len(report.succeeded) + len(report.failed) == 2500
    assert report.ok


async def test_batch_size_is_capped_at_store_limit() -> None:
    store = _store()
    deleter = BatchDeleter(store, KeyExtractor(), batch_size=5000)

    await deleter.delete_all(_urls(1500))

    assert store.delete_objects.await_count == 2


async def test_duplicates_and_foreign_urls() -> None:
    store = _store()
    deleter = BatchDeleter(store, KeyExtractor())
    urls = [f"{BASE}/u1/a.jpg", f"{BASE}/u1/a.jpg", "https://unrelated.cdn/x.jpg", None]

    report = await deleter.delete_all(urls)

    store.delete_objects.assert_awaited_once_with(["u1/a.jpg"])
    assert report.succeeded == ["u1/a.jpg"]
    assert report.skipped == ["https://unrelated.cdn/x.jpg", None]


async def test_nothing_to_delete_makes_no_call() -> None:
    store = _store()
    deleter = BatchDeleter(store, KeyExtractor())

    report = await deleter.delete_all(["https://unrelated.cdn/x.jpg"])

    store.delete_objects.assert_not_awaited()
    assert report.total == 0
    assert report.ok


async def test_failed_batch_does_not_stop_others() -> None:
    calls = {"n": 0}

    def delete(keys):
        calls["n"] += 1
        if calls["n"] == 2:
            raise StorageDeleteError(list(keys), "connection reset")
        return BatchDeleteResult(deleted=list(keys))

    store = _store(side_effect=delete)
    deleter = BatchDeleter(store, KeyExtractor(), batch_size=10)

    report = await deleter.delete_all(_urls(25))

    assert store.delete_objects.await_count == 3
    assert len(report.succeeded) == 15
    assert len(report.failed) == 10
    assert set(report.errors.values()) == {"STORAGE_DELETE_ERROR"}


async def test_no_such_key_counts_as_deleted() -> None:
    store = _store(
        side_effect=lambda keys: BatchDeleteResult(
            deleted=[],
            errors=[
                ObjectDeleteError("u1/a.jpg", "NoSuchKey", "gone"),
                ObjectDeleteError("u1/b.jpg", "AccessDenied", "denied"),
            ],
        )
    )
    deleter = BatchDeleter(store, KeyExtractor())

    report = await deleter.delete_all([f"{BASE}/u1/a.jpg", f"{BASE}/u1/b.jpg"])

    assert report.succeeded == ["u1/a.jpg"]
    assert report.failed == ["u1/b.jpg"]
    assert report.errors == {"u1/b.jpg": "AccessDenied"}


async def test_delete_keys_retries_keys_directly() -> None:
    store = _store()
    deleter = BatchDeleter(store, KeyExtractor())

    report = await deleter.delete_keys(["u1/a.jpg", "", "u1/a.jpg", "u1/b.jpg"])

    store.delete_objects.assert_awaited_once_with(["u1/a.jpg", "u1/b.jpg"])
    assert report.succeeded == ["u1/a.jpg", "u1/b.jpg"]


async def test_unexpected_error_fails_only_its_batch() -> None:
    calls = {"n": 0}

    def delete(keys):
        calls["n"] += 1
        if calls["n"] == 1:
            raise RuntimeError("socket closed")
        return BatchDeleteResult(deleted=list(keys))

    store = _store(side_effect=delete)
    deleter = BatchDeleter(store, KeyExtractor(), batch_size=10)

    report = await deleter.delete_all(_urls(25))

    assert store.delete_objects.await_count == 3
    assert len(report.failed) == 10
    assert len(report.succeeded) == 15
    assert set(report.errors.values()) == {"Unknown"}


async def test_unexpected_error_on_single_key() -> None:
    store = AsyncMock()
    store.delete_objects = AsyncMock(side_effect=RuntimeError("socket closed"))
    deleter = BatchDeleter(store, KeyExtractor())

    report = await deleter.delete_all([f"{BASE}/u1/video/a.mp4"])

    assert report.failed == ["u1/video/a.mp4"]
    assert report.errors == {"u1/video/a.mp4": "Unknown"}
