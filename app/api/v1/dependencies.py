"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions, the current user and application
use cases. All use cases are built from infrastructure implementations here;
routes depend only on these dependencies, not on infra directly.

Process-wide services (cache, object store, key extractor, media cleanup
service) are created in lifespan and read from app.state.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.services import ICacheService, IObjectStore
from app.application.services.history_ledger import HistoryLedger
from app.application.services.lifecycle_guard import LifecycleGuard
from app.application.services.media_ownership import MediaOwnership
from app.application.services.media_cleanup_service import MediaCleanupService
from app.application.services.profile_validator import ProfileValidator
from app.application.services.upload_authorizer import UploadAuthorizer
from app.application.use_cases.memories import MemoryService
from app.application.use_cases.profiles import FamilyMemberService, ProfileService
from app.core.config import Settings, get_settings
from app.infrastructure.exceptions import StorageNotConfiguredError
from app.infrastructure.external.storage import KeyExtractor, StorageFactory
from app.infrastructure.persistence.database import get_db, get_db_transactional
from app.infrastructure.persistence.repositories import (
    FamilyMemberRepository,
    LifecycleHistoryRepository,
    MediaCleanupTaskRepository,
    MemoryRepository,
    OrderRepository,
    ProfileRepository,
)
from app.infrastructure.security.jwt import verify_token

_http_bearer = HTTPBearer(auto_error=False)


# ---- Process-wide services (app.state) ----


def get_app_settings() -> Settings:
    return get_settings()


def get_cache(request: Request) -> ICacheService | None:
    """Profile list cache (InMemoryTTLCache or Redis CacheService) set in lifespan."""
    return getattr(request.app.state, "cache", None)


def get_object_store(request: Request) -> IObjectStore:
    store = getattr(request.app.state, "object_store", None)
    if store is None:
        raise StorageNotConfiguredError("S3_BUCKET")
    return store


def get_key_extractor(request: Request) -> KeyExtractor:
    extractor = getattr(request.app.state, "key_extractor", None)
    return extractor or StorageFactory.create_key_extractor()


def get_media_cleanup_service(request: Request) -> MediaCleanupService | None:
    """None when the object store is not configured; tasks then wait for a worker."""
    return getattr(request.app.state, "media_cleanup_service", None)


# ---- Auth ----


async def get_current_user_id_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> str | None:
    """Return user id (token sub) if a valid bearer token is present; else None."""
    if not credentials:
        return None
    try:
        payload = verify_token(credentials.credentials)
    except ValueError:
        return None
    return str(payload["sub"])


async def get_current_user_id(
    user_id: Annotated[str | None, Depends(get_current_user_id_optional)],
) -> str:
    """Return user id from JWT; raise 401 if missing or invalid."""
    if user_id is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user_id


# ---- Building blocks ----


def _guard(db: AsyncSession) -> LifecycleGuard:
    return LifecycleGuard(
        ProfileRepository(db),
        HistoryLedger(LifecycleHistoryRepository(db)),
        OrderRepository(db),
    )


def _build_profile_service(
    db: AsyncSession,
    cache: ICacheService | None,
    extractor: KeyExtractor,
    settings: Settings,
) -> ProfileService:
    profile_repo = ProfileRepository(db)
    ledger = HistoryLedger(LifecycleHistoryRepository(db))
    return ProfileService(
        profile_repo,
        MemoryRepository(db),
        MediaCleanupTaskRepository(db),
        LifecycleGuard(profile_repo, ledger, OrderRepository(db)),
        ledger,
        ProfileValidator(settings.family_max_members),
        MediaOwnership(extractor.extract_key),
        cache,
        default_max_edits=settings.default_max_edits,
        family_max_members=settings.family_max_members,
        cleanup_max_attempts=settings.media_cleanup_max_attempts,
        cache_ttl=settings.cache_ttl_profiles,
    )


# ---- Use cases ----


async def get_profile_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    cache: Annotated[ICacheService | None, Depends(get_cache)],
    extractor: Annotated[KeyExtractor, Depends(get_key_extractor)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> ProfileService:
    """ProfileService for writes (transactional: ledger, profile and outbox commit together)."""
    return _build_profile_service(db, cache, extractor, settings)


async def get_profile_query_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    cache: Annotated[ICacheService | None, Depends(get_cache)],
    extractor: Annotated[KeyExtractor, Depends(get_key_extractor)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> ProfileService:
    """ProfileService for reads (no transaction)."""
    return _build_profile_service(db, cache, extractor, settings)


async def get_family_member_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    cache: Annotated[ICacheService | None, Depends(get_cache)],
    extractor: Annotated[KeyExtractor, Depends(get_key_extractor)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> FamilyMemberService:
    return FamilyMemberService(
        _guard(db),
        FamilyMemberRepository(db),
        MediaCleanupTaskRepository(db),
        ProfileValidator(settings.family_max_members),
        MediaOwnership(extractor.extract_key),
        cache,
        family_max_members=settings.family_max_members,
        cleanup_max_attempts=settings.media_cleanup_max_attempts,
    )


async def get_memory_service(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    extractor: Annotated[KeyExtractor, Depends(get_key_extractor)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> MemoryService:
    return MemoryService(
        MemoryRepository(db),
        ProfileRepository(db),
        MediaCleanupTaskRepository(db),
        MediaOwnership(extractor.extract_key),
        cleanup_max_attempts=settings.media_cleanup_max_attempts,
    )


async def get_upload_authorizer(
    db: Annotated[AsyncSession, Depends(get_db)],
    object_store: Annotated[IObjectStore, Depends(get_object_store)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> UploadAuthorizer:
    return UploadAuthorizer(
        object_store,
        _guard(db),
        max_image_size=settings.max_image_size,
        max_video_size=settings.max_video_size,
        expires_in=settings.upload_grant_expiry_seconds,
    )
