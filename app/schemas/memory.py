"""Memory wall API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MemorySubmitRequest(BaseModel):
    """Request body for POST /memories (public). Text is sanitized server-side."""

    profile_id: str = Field(..., min_length=1)
    author_name: str = Field(..., max_length=200)
    message: str = Field(..., max_length=5000)
    photo_url: str | None = None


class MemoryAuthorizationRequest(BaseModel):
    is_authorized: bool


class MemoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    profile_id: str
    author_name: str
    message: str
    photo_url: str | None = None
    is_authorized: bool = False
    created_at: datetime | None = None


class MemoryDeleteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    memory_id: str
    cleanup_task_id: str | None = None
