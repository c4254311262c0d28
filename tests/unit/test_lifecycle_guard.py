"""LifecycleGuard and HistoryLedger: create eligibility, lifetime ban, edit limits."""

from unittest.mock import AsyncMock

import pytest

from app.application.services.history_ledger import HistoryLedger
from app.application.services.lifecycle_guard import LifecycleGuard
from app.domain.entities.lifecycle import LifecycleHistoryEntry, OrderEntity
from app.domain.entities.memorial import ProfileEntity
from app.domain.enums import HistoryAction, OrderStatus, ProfileVariant
from app.domain.exceptions import (
    ConflictException,
    HistoryWriteException,
    ResourceNotFoundException,
)
from app.shared.utils.datetime import utc_now


def _profile(**kwargs) -> ProfileEntity:
    defaults = dict(
        id="p1",
        user_id="u1",
        variant=ProfileVariant.INDIVIDUAL,
        slug="ana-1",
        display_name="Ana",
    )
    defaults.update(kwargs)
    return ProfileEntity(**defaults)


@pytest.fixture
def guard_mocks():
    profile_repo = AsyncMock()
    profile_repo.has_active_profile = AsyncMock(return_value=False)
    profile_repo.get_active_by_user = AsyncMock(return_value=None)
    history_repo = AsyncMock()
    history_repo.exists_for_user = AsyncMock(return_value=False)
    order_repo = AsyncMock()
    order_repo.get_completed_order = AsyncMock(
        return_value=OrderEntity("o1", "u1", OrderStatus.COMPLETED, ProfileVariant.INDIVIDUAL)
    )
    guard = LifecycleGuard(profile_repo, HistoryLedger(history_repo), order_repo)
    return guard, profile_repo, history_repo, order_repo


async def test_can_create_fresh_user(guard_mocks) -> None:
    guard, *_ = guard_mocks
    assert await guard.can_create("u1") is True
    await guard.ensure_can_create("u1")


async def test_active_profile_blocks_create(guard_mocks) -> None:
    guard, profile_repo, _, _ = guard_mocks
    profile_repo.has_active_profile = AsyncMock(return_value=True)

    assert await guard.can_create("u1") is False
    with pytest.raises(ConflictException) as exc_info:
        await guard.ensure_can_create("u1")
    assert exc_info.value.details["reason"] == "active_profile_exists"


async def test_deleted_entry_is_a_lifetime_ban(guard_mocks) -> None:
    """The ban holds even when no profile row exists any more."""
    guard, profile_repo, history_repo, _ = guard_mocks
    profile_repo.has_active_profile = AsyncMock(return_value=False)
    history_repo.exists_for_user = AsyncMock(return_value=True)

    assert await guard.can_create("u1") is False
    with pytest.raises(ConflictException) as exc_info:
        await guard.ensure_can_create("u1")
    assert exc_info.value.details["reason"] == "lifetime_ban"
    history_repo.exists_for_user.assert_awaited_with("u1", HistoryAction.DELETED)


async def test_can_edit_limits(guard_mocks) -> None:
    guard, profile_repo, _, _ = guard_mocks

    profile_repo.get_entity = AsyncMock(return_value=_profile(edit_count=2, max_edits=3))
    assert await guard.can_edit("p1") is True

    profile_repo.get_entity = AsyncMock(return_value=_profile(edit_count=3, max_edits=3))
    assert await guard.can_edit("p1") is False

    profile_repo.get_entity = AsyncMock(return_value=_profile(deleted_at=utc_now()))
    assert await guard.can_edit("p1") is False


async def test_can_edit_missing_profile_raises(guard_mocks) -> None:
    guard, profile_repo, _, _ = guard_mocks
    profile_repo.get_entity = AsyncMock(return_value=None)
    with pytest.raises(ResourceNotFoundException):
        await guard.can_edit("missing")


async def test_completed_order_by_variant(guard_mocks) -> None:
    guard, _, _, order_repo = guard_mocks
    order_repo.get_completed_order = AsyncMock(return_value=None)

    assert await guard.has_completed_order("u1", ProfileVariant.FAMILY) is False
    order_repo.get_completed_order.assert_awaited_with("u1", ProfileVariant.FAMILY)


async def test_eligibility_summary(guard_mocks) -> None:
    guard, profile_repo, _, _ = guard_mocks
    profile_repo.get_active_by_user = AsyncMock(return_value=_profile(edit_count=1))

    result = await guard.eligibility("u1")

    assert result.can_create is False
    assert result.has_completed_order is True
    assert result.is_lifetime_banned is False
    assert result.active_profile_id == "p1"
    assert result.remaining_edits == 2


async def test_ledger_write_failure_is_history_write_exception() -> None:
    history_repo = AsyncMock()
    history_repo.append = AsyncMock(side_effect=RuntimeError("db down"))
    ledger = HistoryLedger(history_repo)

    with pytest.raises(HistoryWriteException) as exc_info:
        await ledger.record_deleted("u1", "p1")
    assert exc_info.value.error_code == "HISTORY_WRITE_FAILED"
    assert exc_info.value.details["action"] == "deleted"


async def test_ledger_records_created() -> None:
    entry = LifecycleHistoryEntry("h1", "u1", "p1", HistoryAction.CREATED)
    history_repo = AsyncMock()
    history_repo.append = AsyncMock(return_value=entry)

    assert await HistoryLedger(history_repo).record_created("u1", "p1") == entry
    history_repo.append.assert_awaited_once_with("u1", "p1", HistoryAction.CREATED)
