"""Upload grant API: presigned POST grants for direct browser uploads."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import get_current_user_id_optional, get_upload_authorizer
from app.application.services.upload_authorizer import UploadAuthorizer
from app.core.limiter import limit_upload
from app.schemas.upload import UploadGrantRequest, UploadGrantResponse

router = APIRouter()


@router.post("/grants", response_model=UploadGrantResponse, status_code=201)
@limit_upload
async def request_upload_grant(
    request: Request,
    body: UploadGrantRequest,
    user_id: Annotated[str | None, Depends(get_current_user_id_optional)],
    authorizer: Annotated[UploadAuthorizer, Depends(get_upload_authorizer)],
):
    """Issue a grant. Profile media needs sign-in and a completed order; memory photos do not."""
    grant = await authorizer.authorize(
        user_id, body.category.value, body.content_type, body.size, body.filename
    )
    return UploadGrantResponse.model_validate(grant)
