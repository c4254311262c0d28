"""Upload grant API schemas."""

from pydantic import BaseModel, ConfigDict, Field

from app.domain.enums import UploadCategory


class UploadGrantRequest(BaseModel):
    """Request body for POST /uploads/grants."""

    category: UploadCategory
    content_type: str = Field(..., min_length=1, max_length=100)
    size: int = Field(..., description="Declared file size in bytes")
    filename: str = Field(..., min_length=1, max_length=255)


class UploadGrantResponse(BaseModel):
    """Presigned POST: send fields plus the file (last) as multipart to url."""

    model_config = ConfigDict(from_attributes=True)

    url: str
    fields: dict[str, str]
    key: str
    public_url: str
    content_type: str
    max_size: int
    expires_in: int
