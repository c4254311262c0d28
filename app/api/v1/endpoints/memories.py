"""Memory wall API: public submission and owner moderation."""

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from app.api.v1.dependencies import (
    get_current_user_id,
    get_current_user_id_optional,
    get_media_cleanup_service,
    get_memory_service,
)
from app.application.dtos.memory import MemorySubmit
from app.application.services.media_cleanup_service import MediaCleanupService
from app.application.use_cases.memories import MemoryService
from app.core.limiter import limit_memory_submit, limit_writes
from app.schemas.memory import (
    MemoryAuthorizationRequest,
    MemoryDeleteResponse,
    MemoryResponse,
    MemorySubmitRequest,
)

router = APIRouter()


@router.post("", response_model=MemoryResponse, status_code=201)
@limit_memory_submit
async def submit_memory(
    request: Request,
    body: MemorySubmitRequest,
    memory_svc: Annotated[MemoryService, Depends(get_memory_service)],
    user_id: Annotated[str | None, Depends(get_current_user_id_optional)],
):
    """Submit a memory to a published memorial. Hidden until the owner authorizes it."""
    memory = await memory_svc.submit_memory(
        MemorySubmit(**body.model_dump(), uploader_id=user_id)
    )
    return MemoryResponse.model_validate(memory)


@router.get("/profile/{profile_id}", response_model=list[MemoryResponse])
async def list_public_memories(
    profile_id: str,
    memory_svc: Annotated[MemoryService, Depends(get_memory_service)],
):
    """Authorized memories of a published memorial."""
    memories = await memory_svc.list_public_memories(profile_id)
    return [MemoryResponse.model_validate(m) for m in memories]


@router.patch("/{memory_id}/authorization", response_model=MemoryResponse)
@limit_writes
async def set_memory_authorization(
    request: Request,
    memory_id: str,
    body: MemoryAuthorizationRequest,
    user_id: Annotated[str, Depends(get_current_user_id)],
    memory_svc: Annotated[MemoryService, Depends(get_memory_service)],
):
    """Publish or hide a memory on the caller's memorial."""
    memory = await memory_svc.set_authorized(memory_id, user_id, body.is_authorized)
    return MemoryResponse.model_validate(memory)


@router.delete("/{memory_id}", response_model=MemoryDeleteResponse)
@limit_writes
async def delete_memory(
    request: Request,
    memory_id: str,
    background_tasks: BackgroundTasks,
    user_id: Annotated[str, Depends(get_current_user_id)],
    memory_svc: Annotated[MemoryService, Depends(get_memory_service)],
    cleanup_svc: Annotated[MediaCleanupService | None, Depends(get_media_cleanup_service)],
):
    """Delete a memory from the caller's memorial; its photo is removed in the background."""
    ack = await memory_svc.delete_memory(memory_id, user_id)
    if ack.cleanup_task_id and cleanup_svc is not None:
        background_tasks.add_task(cleanup_svc.dispatch, ack.cleanup_task_id)
    return MemoryDeleteResponse.model_validate(ack)
