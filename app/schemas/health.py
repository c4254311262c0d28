"""Liveness and readiness payloads."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"


class ReadinessResponse(BaseModel):
    """Database reachability plus which optional backends are wired."""

    status: str = Field(default="ok", description="'ok' or 'not_ready'")
    database: str = Field(default="ok", description="'ok' or the connection error")
    object_store: bool = Field(
        default=False, description="Upload grants and media cleanup are enabled"
    )
    cache: bool = Field(default=False, description="Profile list cache is reachable")
