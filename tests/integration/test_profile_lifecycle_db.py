"""Profile lifecycle against Postgres: partial unique index, conditional edits, ledger ban.

Requires DATABASE_URL and `alembic upgrade head`. Each test rolls back.
"""

from datetime import date, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.profile import ProfileCreate, ProfileToPersist
from app.application.services.history_ledger import HistoryLedger
from app.application.services.lifecycle_guard import LifecycleGuard
from app.application.services.media_ownership import MediaOwnership
from app.application.services.profile_validator import ProfileValidator
from app.application.use_cases.profiles import ProfileService
from app.domain.enums import CleanupReason, CleanupTaskStatus, OrderStatus, ProfileVariant
from app.domain.exceptions import ConflictException
from app.infrastructure.external.storage.key_extractor import KeyExtractor
from app.infrastructure.persistence.models.customer_order import CustomerOrder
from app.infrastructure.persistence.repositories import (
    LifecycleHistoryRepository,
    MediaCleanupTaskRepository,
    MemoryRepository,
    OrderRepository,
    ProfileRepository,
)
from app.shared.utils.datetime import utc_now
from app.shared.utils.generators import generate_cuid

pytestmark = pytest.mark.requires_db

CDN = "https://pub-test.r2.dev"


def _row(user_id: str, slug: str) -> ProfileToPersist:
    return ProfileToPersist(
        user_id=user_id,
        order_id=None,
        variant=ProfileVariant.INDIVIDUAL,
        slug=slug,
        display_name="Ana",
        max_edits=3,
        max_members=None,
        values={},
    )


def _service(db: AsyncSession) -> ProfileService:
    profile_repo = ProfileRepository(db)
    ledger = HistoryLedger(LifecycleHistoryRepository(db))
    return ProfileService(
        profile_repo,
        MemoryRepository(db),
        MediaCleanupTaskRepository(db),
        LifecycleGuard(profile_repo, ledger, OrderRepository(db)),
        ledger,
        ProfileValidator(),
        MediaOwnership(KeyExtractor(public_base_url=CDN).extract_key),
    )


async def _completed_order(db: AsyncSession, user_id: str) -> None:
    db.add(
        CustomerOrder(
            user_id=user_id,
            status=OrderStatus.COMPLETED.value,
            variant=ProfileVariant.INDIVIDUAL.value,
            paid_at=utc_now(),
        )
    )
    await db.flush()


async def test_second_active_profile_rejected_by_index(db_session: AsyncSession) -> None:
    repo = ProfileRepository(db_session)
    user_id = f"it-{generate_cuid()}"

    await repo.create_profile(_row(user_id, f"ana-{generate_cuid()}"))
    with pytest.raises(ConflictException) as exc_info:
        await repo.create_profile(_row(user_id, f"ana-{generate_cuid()}"))

    assert exc_info.value.details["reason"] == "active_profile_exists"


async def test_edit_count_never_passes_limit(db_session: AsyncSession) -> None:
    repo = ProfileRepository(db_session)
    profile = await repo.create_profile(_row(f"it-{generate_cuid()}", f"ana-{generate_cuid()}"))

    for i in range(3):
        edited = await repo.apply_edit(profile.id, {"description": f"v{i}"})
        assert edited is not None
    assert await repo.apply_edit(profile.id, {"description": "v4"}) is None

    current = await repo.get_entity(profile.id)
    assert current.edit_count == 3
    assert current.description == "v2"


async def test_delete_bans_recreate_and_queues_media(db_session: AsyncSession) -> None:
    user_id = f"it-{generate_cuid()}"
    await _completed_order(db_session, user_id)
    service = _service(db_session)

    created = await service.create_profile(
        user_id,
        ProfileCreate(
            variant=ProfileVariant.INDIVIDUAL,
            display_name="Ana",
            birth_date=date(1940, 1, 1),
            death_date=date(2020, 1, 1),
            gallery_images=[f"{CDN}/{user_id}/gallery-image/1-abc123-a.jpg"] * 2,
        ),
    )
    ack = await service.delete_profile(created.profile.id, user_id)

    assert ack.media_count == 1
    task = await MediaCleanupTaskRepository(db_session).get(ack.cleanup_task_id)
    assert task.reason == CleanupReason.PROFILE_DELETED
    assert task.status == CleanupTaskStatus.PENDING

    with pytest.raises(ConflictException) as exc_info:
        await service.create_profile(
            user_id, ProfileCreate(variant=ProfileVariant.INDIVIDUAL, display_name="Ana")
        )
    assert exc_info.value.details["reason"] == "lifetime_ban"


async def test_photo_in_use_ignores_excluded_profile(db_session: AsyncSession) -> None:
    profiles = ProfileRepository(db_session)
    memories = MemoryRepository(db_session)
    photo = f"{CDN}/anonymous/memory-image/1-abc123-{generate_cuid()}.jpg"
    first = await profiles.create_profile(_row(f"it-{generate_cuid()}", f"ana-{generate_cuid()}"))
    second = await profiles.create_profile(_row(f"it-{generate_cuid()}", f"ana-{generate_cuid()}"))
    own = await memories.create_memory(
        first.id, ProfileVariant.INDIVIDUAL, "Tom", "We miss you a lot", photo
    )

    assert await memories.photo_urls_in_use([photo], exclude_profile_id=first.id) == set()
    assert await memories.photo_urls_in_use([photo], exclude_memory_id=own.id) == set()

    await memories.create_memory(
        second.id, ProfileVariant.INDIVIDUAL, "Eva", "We miss you a lot", photo
    )
    assert await memories.photo_urls_in_use([photo], exclude_profile_id=first.id) == {photo}


async def test_cleanup_task_claim_is_exclusive(db_session: AsyncSession) -> None:
    repo = MediaCleanupTaskRepository(db_session)
    task = await repo.enqueue(CleanupReason.MEMORY_DELETED, "mem-1", ["https://x/a"], 2)
    stale_before = utc_now() - timedelta(hours=1)

    assert (await repo.claim(task.id, stale_before)) is not None
    assert await repo.claim(task.id, stale_before) is None

    status = await repo.mark_attempt_failed(task.id, ["a"], "1 key(s) failed: AccessDenied")
    assert status == CleanupTaskStatus.PENDING
    await repo.claim(task.id, stale_before)
    status = await repo.mark_attempt_failed(task.id, ["a"], "1 key(s) failed: AccessDenied")
    assert status == CleanupTaskStatus.FAILED
