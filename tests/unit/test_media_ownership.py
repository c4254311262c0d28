"""MediaOwnership: who may reference an uploaded object, and what may be deleted."""

import pytest

from app.application.services.media_ownership import MediaOwnership
from app.domain.exceptions import ValidationException
from app.infrastructure.external.storage.key_extractor import KeyExtractor

CDN = "https://pub-test.r2.dev"
PRIVATE = "https://acct.r2.cloudflarestorage.com"


@pytest.fixture
def ownership() -> MediaOwnership:
    extractor = KeyExtractor(public_base_url=CDN, endpoint_url=PRIVATE, bucket="memorial-media")
    return MediaOwnership(extractor.extract_key)


class TestProfileMedia:
    @pytest.mark.parametrize(
        "url",
        [
            f"{CDN}/u1/profile-image/1-abc123-a.jpg",
            f"{CDN}/u1/gallery-image/1-abc123-a.jpg",
            f"{CDN}/u1/video/1-abc123-a.mp4",
            f"{PRIVATE}/memorial-media/u1/video/1-abc123-a.mp4",
            "https://images.example.com/a.jpg",
            None,
        ],
    )
    def test_accepted(self, ownership: MediaOwnership, url) -> None:
        ownership.require_profile_media("u1", [url], "gallery_images")

    @pytest.mark.parametrize(
        "url",
        [
            f"{CDN}/u2/profile-image/1-abc123-a.jpg",
            f"{CDN}/u1/memory-image/1-abc123-a.jpg",
            f"{CDN}/anonymous/memory-image/1-abc123-a.jpg",
            f"{CDN}/u1-other/video/1-abc123-a.mp4",
        ],
    )
    def test_rejected(self, ownership: MediaOwnership, url: str) -> None:
        with pytest.raises(ValidationException) as exc_info:
            ownership.require_profile_media("u1", [url], "banner_image_url")
        assert exc_info.value.details["field"] == "banner_image_url"

    def test_deletable_keeps_owner_prefix_only(self, ownership: MediaOwnership) -> None:
        own = f"{CDN}/u1/gallery-image/1-abc123-a.jpg"
        urls = [
            own,
            f"{CDN}/victim/profile-image/1-abc123-me.jpg",
            f"{PRIVATE}/other-bucket/u1/gallery-image/1-abc123-a.jpg",
            "https://images.example.com/a.jpg",
        ]
        assert ownership.deletable_profile_media("u1", urls) == {own}


class TestMemoryPhotos:
    def test_anonymous_upload_accepted(self, ownership: MediaOwnership) -> None:
        ownership.require_memory_photo(f"{CDN}/anonymous/memory-image/1-abc123-a.jpg")

    def test_signed_in_upload_needs_matching_submitter(self, ownership: MediaOwnership) -> None:
        url = f"{CDN}/u7/memory-image/1-abc123-a.jpg"
        ownership.require_memory_photo(url, uploader_id="u7")
        with pytest.raises(ValidationException):
            ownership.require_memory_photo(url)

    @pytest.mark.parametrize(
        "url",
        [
            f"{CDN}/victim/profile-image/1-abc123-me.jpg",
            f"{CDN}/anonymous/gallery-image/1-abc123-a.jpg",
            "https://evil.example/x.jpg",
        ],
    )
    def test_rejected(self, ownership: MediaOwnership, url: str) -> None:
        with pytest.raises(ValidationException) as exc_info:
            ownership.require_memory_photo(url)
        assert exc_info.value.details["field"] == "photo_url"

    def test_deletable_keeps_memory_images_only(self, ownership: MediaOwnership) -> None:
        photo = f"{CDN}/u7/memory-image/1-abc123-a.jpg"
        urls = [photo, f"{CDN}/victim/profile-image/1-abc123-me.jpg", "https://evil.example/x.jpg"]
        assert ownership.deletable_memory_photos(urls) == {photo}
