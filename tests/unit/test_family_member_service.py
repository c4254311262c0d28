"""FamilyMemberService: member cap, last-member rule, media queued on removal."""

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.application.dtos.profile import FamilyMemberCreate
from app.application.services.media_ownership import MediaOwnership
from app.application.services.profile_validator import ProfileValidator
from app.application.use_cases.profiles import FamilyMemberService
from app.domain.entities.memorial import FamilyMemberEntity, ProfileEntity
from app.domain.enums import CleanupReason, ProfileVariant
from app.domain.exceptions import (
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from app.infrastructure.external.storage.key_extractor import KeyExtractor
from app.shared.utils.datetime import utc_now


def _family(**kwargs) -> ProfileEntity:
    defaults = dict(
        id="f1",
        user_id="u1",
        variant=ProfileVariant.FAMILY,
        slug="familia-garcia-1",
        display_name="Garcia",
        max_members=10,
    )
    defaults.update(kwargs)
    return ProfileEntity(**defaults)


def _member(**kwargs) -> FamilyMemberEntity:
    defaults = dict(id="m2", family_profile_id="f1", name="Luis")
    defaults.update(kwargs)
    return FamilyMemberEntity(**defaults)


CDN = "https://pub-test.r2.dev"
IMG = f"{CDN}/u1/profile-image/1-abc123-luis.jpg"
VID = f"{CDN}/u1/video/1-abc123-luis.mp4"
VICTIM_IMAGE = f"{CDN}/victim/profile-image/1-abc123-me.jpg"

NEW_MEMBER = FamilyMemberCreate(
    name=" Rosa ", birth_date=date(1930, 2, 2), death_date=date(2001, 3, 3)
)


@pytest.fixture
def guard():
    guard = AsyncMock()
    guard.get_profile = AsyncMock(return_value=_family())
    return guard


@pytest.fixture
def member_repo():
    repo = AsyncMock()
    repo.count_for_profile = AsyncMock(return_value=2)
    repo.add_member = AsyncMock(side_effect=lambda pid, data: _member(id="m3", name=data.name))
    repo.get_member = AsyncMock(return_value=_member())
    return repo


@pytest.fixture
def cleanup_repo():
    repo = AsyncMock()
    repo.enqueue = AsyncMock(return_value=MagicMock(id="task-9"))
    return repo


@pytest.fixture
def service(guard, member_repo, cleanup_repo) -> FamilyMemberService:
    cache = AsyncMock()
    cache.is_available = MagicMock(return_value=True)
    ownership = MediaOwnership(KeyExtractor(public_base_url=CDN).extract_key)
    return FamilyMemberService(
        guard, member_repo, cleanup_repo, ProfileValidator(), ownership, cache
    )


async def test_add_member(service: FamilyMemberService, member_repo) -> None:
    member = await service.add_member("f1", "u1", NEW_MEMBER)

    assert member.name == "Rosa"
    _, cleaned = member_repo.add_member.await_args.args
    assert cleaned.name == "Rosa"


async def test_add_member_at_cap_is_conflict(
    service: FamilyMemberService, member_repo, guard
) -> None:
    guard.get_profile = AsyncMock(return_value=_family(max_members=2))

    with pytest.raises(ConflictException) as exc_info:
        await service.add_member("f1", "u1", NEW_MEMBER)

    assert exc_info.value.details == {"reason": "member_limit_reached", "max_members": 2}
    member_repo.add_member.assert_not_awaited()


async def test_add_member_requires_dates(service: FamilyMemberService) -> None:
    with pytest.raises(ValidationException):
        await service.add_member("f1", "u1", FamilyMemberCreate(name="Rosa"))


async def test_individual_profile_has_no_members(service: FamilyMemberService, guard) -> None:
    guard.get_profile = AsyncMock(return_value=_family(variant=ProfileVariant.INDIVIDUAL))

    with pytest.raises(ValidationException) as exc_info:
        await service.add_member("f1", "u1", NEW_MEMBER)
    assert exc_info.value.details["field"] == "profile_id"


async def test_other_owner_is_not_found(service: FamilyMemberService) -> None:
    with pytest.raises(ResourceNotFoundException):
        await service.add_member("f1", "intruder", NEW_MEMBER)


async def test_deleted_profile_is_conflict(service: FamilyMemberService, guard) -> None:
    guard.get_profile = AsyncMock(return_value=_family(deleted_at=utc_now()))

    with pytest.raises(ConflictException) as exc_info:
        await service.add_member("f1", "u1", NEW_MEMBER)
    assert exc_info.value.details["reason"] == "profile_deleted"


async def test_remove_member_queues_media(
    service: FamilyMemberService, member_repo, cleanup_repo
) -> None:
    member_repo.get_member = AsyncMock(
        return_value=_member(profile_image_url=IMG, memorial_video_url=VID)
    )

    task_id = await service.remove_member("f1", "m2", "u1")

    assert task_id == "task-9"
    member_repo.remove_member.assert_awaited_once_with("m2")
    cleanup_repo.enqueue.assert_awaited_once_with(
        CleanupReason.MEMBER_REMOVED, "m2", [IMG, VID], 5
    )


async def test_add_member_rejects_another_users_upload(
    service: FamilyMemberService, member_repo
) -> None:
    data = FamilyMemberCreate(
        name="Rosa",
        birth_date=date(1930, 2, 2),
        death_date=date(2001, 3, 3),
        profile_image_url=VICTIM_IMAGE,
    )

    with pytest.raises(ValidationException) as exc_info:
        await service.add_member("f1", "u1", data)

    assert exc_info.value.details["field"] == "members[2]"
    member_repo.add_member.assert_not_awaited()


async def test_remove_member_skips_foreign_and_shared_media(
    service: FamilyMemberService, member_repo, cleanup_repo, guard
) -> None:
    member_repo.get_member = AsyncMock(
        return_value=_member(profile_image_url=VICTIM_IMAGE, memorial_video_url=VID)
    )
    guard.get_profile = AsyncMock(
        return_value=_family(
            members=[
                _member(id="m1", memorial_video_url=VID),
                _member(profile_image_url=VICTIM_IMAGE, memorial_video_url=VID),
            ]
        )
    )

    assert await service.remove_member("f1", "m2", "u1") is None
    member_repo.remove_member.assert_awaited_once_with("m2")
    cleanup_repo.enqueue.assert_not_awaited()


async def test_remove_member_without_media(
    service: FamilyMemberService, cleanup_repo
) -> None:
    assert await service.remove_member("f1", "m2", "u1") is None
    cleanup_repo.enqueue.assert_not_awaited()


async def test_last_member_cannot_be_removed(
    service: FamilyMemberService, member_repo
) -> None:
    member_repo.count_for_profile = AsyncMock(return_value=1)

    with pytest.raises(ConflictException) as exc_info:
        await service.remove_member("f1", "m2", "u1")

    assert exc_info.value.details["reason"] == "last_member"
    member_repo.remove_member.assert_not_awaited()


async def test_unknown_member_is_not_found(service: FamilyMemberService, member_repo) -> None:
    member_repo.get_member = AsyncMock(return_value=None)

    with pytest.raises(ResourceNotFoundException) as exc_info:
        await service.remove_member("f1", "nope", "u1")
    assert exc_info.value.details["resource_type"] == "family_member"
