"""Memorial profile API: thin routes delegating to ProfileService and FamilyMemberService."""

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from app.api.v1.dependencies import (
    get_current_user_id,
    get_family_member_service,
    get_media_cleanup_service,
    get_profile_query_service,
    get_profile_service,
)
from app.application.services.media_cleanup_service import MediaCleanupService
from app.application.use_cases.profiles import FamilyMemberService, ProfileService
from app.core.limiter import limit_writes
from app.schemas.profile import (
    EligibilityResponse,
    FamilyMemberRequest,
    FamilyMemberResponse,
    MemberRemoveResponse,
    ProfileCreateRequest,
    ProfileDeleteResponse,
    ProfileEditRequest,
    ProfileMutationResponse,
    ProfileResponse,
)

router = APIRouter()


def _refresh_cache_after_commit(
    background_tasks: BackgroundTasks,
    svc: ProfileService | FamilyMemberService,
    user_id: str,
) -> None:
    """Invalidate again after commit; a read during the request may have re-cached old rows."""
    background_tasks.add_task(svc.invalidate_cached_profiles, user_id)


def _schedule_cleanup(
    background_tasks: BackgroundTasks,
    cleanup_svc: MediaCleanupService | None,
    task_id: str | None,
) -> None:
    """Run the outbox task after the response; the worker picks it up if this does not."""
    if task_id and cleanup_svc is not None:
        background_tasks.add_task(cleanup_svc.dispatch, task_id)


@router.post("", response_model=ProfileMutationResponse, status_code=201)
@limit_writes
async def create_profile(
    request: Request,
    body: ProfileCreateRequest,
    background_tasks: BackgroundTasks,
    user_id: Annotated[str, Depends(get_current_user_id)],
    profile_svc: Annotated[ProfileService, Depends(get_profile_service)],
):
    """Create the caller's memorial (requires a completed order; one per lifetime)."""
    result = await profile_svc.create_profile(user_id, body.to_command())
    _refresh_cache_after_commit(background_tasks, profile_svc, user_id)
    return ProfileMutationResponse(profile=ProfileResponse.from_entity(result.profile))


@router.get("/me", response_model=list[ProfileResponse])
async def get_my_profiles(
    user_id: Annotated[str, Depends(get_current_user_id)],
    profile_svc: Annotated[ProfileService, Depends(get_profile_query_service)],
):
    """Active memorials of the caller."""
    profiles = await profile_svc.get_my_profiles(user_id)
    return [ProfileResponse.from_entity(p) for p in profiles]


@router.get("/eligibility", response_model=EligibilityResponse)
async def get_eligibility(
    user_id: Annotated[str, Depends(get_current_user_id)],
    profile_svc: Annotated[ProfileService, Depends(get_profile_query_service)],
):
    """Whether the caller may create a memorial, and edits left on the active one."""
    return EligibilityResponse.from_dto(await profile_svc.eligibility(user_id))


@router.get("/public/{slug}", response_model=ProfileResponse)
async def get_public_profile(
    slug: str,
    profile_svc: Annotated[ProfileService, Depends(get_profile_query_service)],
):
    """Published, active memorial by slug. No authentication."""
    return ProfileResponse.from_entity(await profile_svc.get_public_profile(slug))


@router.patch("/{profile_id}", response_model=ProfileMutationResponse)
@limit_writes
async def edit_profile(
    request: Request,
    profile_id: str,
    body: ProfileEditRequest,
    background_tasks: BackgroundTasks,
    user_id: Annotated[str, Depends(get_current_user_id)],
    profile_svc: Annotated[ProfileService, Depends(get_profile_service)],
    cleanup_svc: Annotated[MediaCleanupService | None, Depends(get_media_cleanup_service)],
):
    """Apply one edit. Media replaced by the edit is removed in the background."""
    result = await profile_svc.edit_profile(
        profile_id, user_id, body.model_dump(exclude_unset=True)
    )
    _schedule_cleanup(background_tasks, cleanup_svc, result.cleanup_task_id)
    _refresh_cache_after_commit(background_tasks, profile_svc, user_id)
    return ProfileMutationResponse(
        profile=ProfileResponse.from_entity(result.profile),
        cleanup_task_id=result.cleanup_task_id,
    )


@router.delete("/{profile_id}", response_model=ProfileDeleteResponse)
@limit_writes
async def delete_profile(
    request: Request,
    profile_id: str,
    background_tasks: BackgroundTasks,
    user_id: Annotated[str, Depends(get_current_user_id)],
    profile_svc: Annotated[ProfileService, Depends(get_profile_service)],
    cleanup_svc: Annotated[MediaCleanupService | None, Depends(get_media_cleanup_service)],
):
    """Soft-delete the caller's memorial. The account cannot create another one afterwards."""
    ack = await profile_svc.delete_profile(profile_id, user_id)
    _schedule_cleanup(background_tasks, cleanup_svc, ack.cleanup_task_id)
    _refresh_cache_after_commit(background_tasks, profile_svc, user_id)
    return ProfileDeleteResponse.from_ack(ack)


@router.post(
    "/{profile_id}/members", response_model=FamilyMemberResponse, status_code=201
)
@limit_writes
async def add_member(
    request: Request,
    profile_id: str,
    body: FamilyMemberRequest,
    background_tasks: BackgroundTasks,
    user_id: Annotated[str, Depends(get_current_user_id)],
    member_svc: Annotated[FamilyMemberService, Depends(get_family_member_service)],
):
    """Add a member to the caller's family memorial (does not count as an edit)."""
    member = await member_svc.add_member(profile_id, user_id, body.to_command())
    _refresh_cache_after_commit(background_tasks, member_svc, user_id)
    return FamilyMemberResponse.from_entity(member)


@router.delete(
    "/{profile_id}/members/{member_id}", response_model=MemberRemoveResponse
)
@limit_writes
async def remove_member(
    request: Request,
    profile_id: str,
    member_id: str,
    background_tasks: BackgroundTasks,
    user_id: Annotated[str, Depends(get_current_user_id)],
    member_svc: Annotated[FamilyMemberService, Depends(get_family_member_service)],
    cleanup_svc: Annotated[MediaCleanupService | None, Depends(get_media_cleanup_service)],
):
    """Remove a member (never the last one); its media is removed in the background."""
    task_id = await member_svc.remove_member(profile_id, member_id, user_id)
    _schedule_cleanup(background_tasks, cleanup_svc, task_id)
    _refresh_cache_after_commit(background_tasks, member_svc, user_id)
    return MemberRemoveResponse(member_id=member_id, cleanup_task_id=task_id)
