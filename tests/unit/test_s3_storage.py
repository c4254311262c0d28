"""S3ObjectStore against a mocked boto3 client."""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from app.infrastructure.exceptions import StorageDeleteError, StoragePresignError
from app.infrastructure.external.storage.s3_storage import S3ObjectStore


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def store(client) -> S3ObjectStore:
    return S3ObjectStore(
        bucket="memorials",
        endpoint_url="https://acct.r2.cloudflarestorage.com/",
        public_base_url="https://pub-test.r2.dev/",
        client=client,
    )


def test_public_url_prefers_cdn_base(store: S3ObjectStore) -> None:
    assert store.public_url("u1/video/1-a b.mp4") == "https://pub-test.r2.dev/u1/video/1-a%20b.mp4"


def test_public_url_falls_back_to_endpoint(client) -> None:
    store = S3ObjectStore(
        bucket="memorials", endpoint_url="https://acct.r2.cloudflarestorage.com", client=client
    )
    assert store.public_url("k.jpg") == "https://acct.r2.cloudflarestorage.com/memorials/k.jpg"


def test_public_url_aws_virtual_host(client) -> None:
    store = S3ObjectStore(bucket="memorials", region="us-east-1", client=client)
    assert store.public_url("k.jpg") == "https://memorials.s3.us-east-1.amazonaws.com/k.jpg"


async def test_delete_objects_reports_per_key(store: S3ObjectStore, client) -> None:
    client.delete_objects.return_value = {
        "Deleted": [{"Key": "a"}],
        "Errors": [{"Key": "b", "Code": "AccessDenied", "Message": "nope"}],
    }

    result = await store.delete_objects(["a", "b"])

    assert result.deleted == ["a"]
    assert [(e.key, e.code) for e in result.errors] == [("b", "AccessDenied")]
    kwargs = client.delete_objects.call_args.kwargs
    assert kwargs["Bucket"] == "memorials"
    assert kwargs["Delete"] == {"Objects": [{"Key": "a"}, {"Key": "b"}], "Quiet": False}


async def test_delete_objects_empty_makes_no_call(store: S3ObjectStore, client) -> None:
    result = await store.delete_objects([])
    assert result.deleted == []
    client.delete_objects.assert_not_called()


async def test_delete_objects_over_ceiling_rejected(store: S3ObjectStore, client) -> None:
    with pytest.raises(ValueError):
        await store.delete_objects([f"k{i}" for i in range(1001)])
    client.delete_objects.assert_not_called()


async def test_delete_objects_client_error(store: S3ObjectStore, client) -> None:
    client.delete_objects.side_effect = ClientError(
        {"Error": {"Code": "InternalError", "Message": "boom"}}, "DeleteObjects"
    )
    with pytest.raises(StorageDeleteError):
        await store.delete_objects(["a"])


async def test_delete_objects_unreachable(store: S3ObjectStore, client) -> None:
    client.delete_objects.side_effect = EndpointConnectionError(endpoint_url="https://x")
    with pytest.raises(StorageDeleteError):
        await store.delete_objects(["a"])


async def test_presigned_post(store: S3ObjectStore, client) -> None:
    client.generate_presigned_post.return_value = {
        "url": "https://acct.r2.cloudflarestorage.com/memorials",
        "fields": {"key": "u1/video/k.mp4", "policy": "p"},
    }
    conditions = [["content-length-range", 1, 100]]

    post = await store.generate_presigned_post("u1/video/k.mp4", "video/mp4", conditions, 1800)

    assert post.url == "https://acct.r2.cloudflarestorage.com/memorials"
    assert post.fields["key"] == "u1/video/k.mp4"
    client.generate_presigned_post.assert_called_once_with(
        Bucket="memorials",
        Key="u1/video/k.mp4",
        Fields={"Content-Type": "video/mp4"},
        Conditions=conditions,
        ExpiresIn=1800,
    )


async def test_presigned_post_error(store: S3ObjectStore, client) -> None:
    client.generate_presigned_post.side_effect = ClientError(
        {"Error": {"Code": "AccessDenied", "Message": "no"}}, "PostObject"
    )
    with pytest.raises(StoragePresignError):
        await store.generate_presigned_post("k", "image/png", [], 60)
