"""Profile endpoints: status mapping and payload shape (use cases overridden, no DB)."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from httpx import AsyncClient

from app.api.v1.dependencies import (
    get_family_member_service,
    get_media_cleanup_service,
    get_profile_query_service,
    get_profile_service,
)
from app.application.dtos.profile import DeleteAck, Eligibility, ProfileResult
from app.domain.entities.memorial import FamilyMemberEntity, ProfileEntity
from app.domain.enums import ProfileVariant
from app.domain.exceptions import (
    ConflictException,
    HistoryWriteException,
    ResourceNotFoundException,
    ValidationException,
)

PROFILE = ProfileEntity(
    id="p1",
    user_id="u1",
    variant=ProfileVariant.INDIVIDUAL,
    slug="ana-1700000000000",
    display_name="Ana",
    edit_count=1,
)


@pytest.fixture
def profile_svc(app: FastAPI) -> MagicMock:
    svc = MagicMock()
    for name in (
        "create_profile",
        "edit_profile",
        "delete_profile",
        "get_my_profiles",
        "get_public_profile",
        "eligibility",
        "invalidate_cached_profiles",
    ):
        setattr(svc, name, AsyncMock())
    app.dependency_overrides[get_profile_service] = lambda: svc
    app.dependency_overrides[get_profile_query_service] = lambda: svc
    return svc


@pytest.fixture
def cleanup_svc(app: FastAPI) -> MagicMock:
    svc = MagicMock()
    svc.dispatch = AsyncMock()
    app.dependency_overrides[get_media_cleanup_service] = lambda: svc
    return svc


async def test_create_profile_returns_201(
    client: AsyncClient, auth_headers, profile_svc
) -> None:
    profile_svc.create_profile.return_value = ProfileResult(profile=PROFILE)

    response = await client.post(
        "/api/v1/profiles",
        json={"variant": "individual", "display_name": "Ana"},
        headers=auth_headers,
    )

    assert response.status_code == 201
    body = response.json()["profile"]
    assert body["slug"] == "ana-1700000000000"
    assert body["remaining_edits"] == 2
    user_id, command = profile_svc.create_profile.await_args.args
    assert user_id == "u1"
    assert command.display_name == "Ana"
    profile_svc.invalidate_cached_profiles.assert_awaited_once_with("u1")


async def test_create_without_order_returns_400(
    client: AsyncClient, auth_headers, profile_svc
) -> None:
    profile_svc.create_profile.side_effect = ValidationException(
        "A completed order is required", field="order"
    )

    response = await client.post(
        "/api/v1/profiles", json={"display_name": "Ana"}, headers=auth_headers
    )

    assert response.status_code == 400
    assert response.json()["details"] == {"field": "order"}


async def test_create_when_banned_returns_409(
    client: AsyncClient, auth_headers, profile_svc
) -> None:
    profile_svc.create_profile.side_effect = ConflictException("banned", "lifetime_ban")

    response = await client.post(
        "/api/v1/profiles", json={"display_name": "Ana"}, headers=auth_headers
    )

    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "LIFECYCLE_CONFLICT"
    assert body["details"]["reason"] == "lifetime_ban"


async def test_create_requires_auth(client: AsyncClient, profile_svc) -> None:
    response = await client.post("/api/v1/profiles", json={"display_name": "Ana"})
    assert response.status_code == 401
    profile_svc.create_profile.assert_not_awaited()


async def test_invalid_token_is_401(client: AsyncClient, profile_svc) -> None:
    response = await client.get(
        "/api/v1/profiles/me", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401


async def test_create_missing_name_is_422(client: AsyncClient, auth_headers, profile_svc) -> None:
    response = await client.post("/api/v1/profiles", json={}, headers=auth_headers)
    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_edit_limit_returns_409(client: AsyncClient, auth_headers, profile_svc) -> None:
    profile_svc.edit_profile.side_effect = ConflictException(
        "Edit limit reached (3 edits)", "edit_limit_reached", max_edits=3
    )

    response = await client.patch(
        "/api/v1/profiles/p1", json={"description": "new"}, headers=auth_headers
    )

    assert response.status_code == 409
    assert response.json()["details"] == {"reason": "edit_limit_reached", "max_edits": 3}


async def test_edit_sends_only_submitted_fields(
    client: AsyncClient, auth_headers, profile_svc, cleanup_svc
) -> None:
    profile_svc.edit_profile.return_value = ProfileResult(profile=PROFILE, cleanup_task_id="t1")

    response = await client.patch(
        "/api/v1/profiles/p1", json={"banner_image_url": None}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()["cleanup_task_id"] == "t1"
    assert profile_svc.edit_profile.await_args.args == ("p1", "u1", {"banner_image_url": None})
    cleanup_svc.dispatch.assert_awaited_once_with("t1")
    profile_svc.invalidate_cached_profiles.assert_awaited_once_with("u1")


async def test_edit_rejects_unknown_fields(client: AsyncClient, auth_headers, profile_svc) -> None:
    response = await client.patch(
        "/api/v1/profiles/p1", json={"edit_count": 0}, headers=auth_headers
    )
    assert response.status_code == 422
    profile_svc.edit_profile.assert_not_awaited()


async def test_delete_schedules_cleanup(
    client: AsyncClient, auth_headers, profile_svc, cleanup_svc
) -> None:
    profile_svc.delete_profile.return_value = DeleteAck(
        profile_id="p1",
        deleted_at=datetime(2024, 6, 1, tzinfo=timezone.utc),
        media_count=4,
        cleanup_task_id="t9",
    )

    response = await client.delete("/api/v1/profiles/p1", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["media_count"] == 4
    cleanup_svc.dispatch.assert_awaited_once_with("t9")
    profile_svc.invalidate_cached_profiles.assert_awaited_once_with("u1")


async def test_delete_without_media_schedules_nothing(
    client: AsyncClient, auth_headers, profile_svc, cleanup_svc
) -> None:
    profile_svc.delete_profile.return_value = DeleteAck(
        profile_id="p1", deleted_at=datetime(2024, 6, 1, tzinfo=timezone.utc), media_count=0
    )

    response = await client.delete("/api/v1/profiles/p1", headers=auth_headers)

    assert response.status_code == 200
    cleanup_svc.dispatch.assert_not_awaited()


async def test_delete_history_failure_returns_500(
    client: AsyncClient, auth_headers, profile_svc
) -> None:
    profile_svc.delete_profile.side_effect = HistoryWriteException("u1", "p1", "deleted", "db down")

    response = await client.delete("/api/v1/profiles/p1", headers=auth_headers)

    assert response.status_code == 500
    assert response.json()["error"] == "HISTORY_WRITE_FAILED"


async def test_delete_other_users_profile_is_404(
    client: AsyncClient, auth_headers, profile_svc
) -> None:
    profile_svc.delete_profile.side_effect = ResourceNotFoundException("memorial_profile", "p2")

    response = await client.delete("/api/v1/profiles/p2", headers=auth_headers)

    assert response.status_code == 404


async def test_my_profiles(client: AsyncClient, auth_headers, profile_svc) -> None:
    profile_svc.get_my_profiles.return_value = [PROFILE]

    response = await client.get("/api/v1/profiles/me", headers=auth_headers)

    assert response.status_code == 200
    assert [p["id"] for p in response.json()] == ["p1"]


async def test_eligibility(client: AsyncClient, auth_headers, profile_svc) -> None:
    profile_svc.eligibility.return_value = Eligibility(
        can_create=False, has_completed_order=True, is_lifetime_banned=True
    )

    response = await client.get("/api/v1/profiles/eligibility", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["is_lifetime_banned"] is True


async def test_public_profile_needs_no_token(client: AsyncClient, profile_svc) -> None:
    profile_svc.get_public_profile.return_value = PROFILE

    response = await client.get("/api/v1/profiles/public/ana-1700000000000")

    assert response.status_code == 200
    profile_svc.get_public_profile.assert_awaited_once_with("ana-1700000000000")


async def test_member_endpoints(client: AsyncClient, app: FastAPI, auth_headers, cleanup_svc) -> None:
    member_svc = MagicMock()
    member_svc.add_member = AsyncMock(
        return_value=FamilyMemberEntity(id="m3", family_profile_id="f1", name="Rosa")
    )
    member_svc.remove_member = AsyncMock(
        side_effect=ConflictException("last member", "last_member")
    )
    member_svc.invalidate_cached_profiles = AsyncMock()
    app.dependency_overrides[get_family_member_service] = lambda: member_svc

    added = await client.post(
        "/api/v1/profiles/f1/members",
        json={"name": "Rosa", "birth_date": "1930-02-02", "death_date": "2001-03-03"},
        headers=auth_headers,
    )
    removed = await client.delete("/api/v1/profiles/f1/members/m1", headers=auth_headers)

    assert added.status_code == 201
    assert added.json()["id"] == "m3"
    assert removed.status_code == 409
    assert removed.json()["details"]["reason"] == "last_member"
    cleanup_svc.dispatch.assert_not_awaited()
    member_svc.invalidate_cached_profiles.assert_awaited_once_with("u1")


async def test_failed_edit_does_not_refresh_cache(
    client: AsyncClient, auth_headers, profile_svc
) -> None:
    profile_svc.edit_profile.side_effect = ConflictException("deleted", "profile_deleted")

    response = await client.patch(
        "/api/v1/profiles/p1", json={"description": "new"}, headers=auth_headers
    )

    assert response.status_code == 409
    profile_svc.invalidate_cached_profiles.assert_not_awaited()
