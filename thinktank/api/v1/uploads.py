"""
Image upload endpoint. Files are forwarded to object storage; only the
resulting URL is kept.
"""

from typing import Optional

from fastapi import APIRouter, File, Form, Request, UploadFile, status

from thinktank.api.deps import DbSession, MemberCaller, get_client_ip
from thinktank.config import get_settings
from thinktank.schemas.audit import UploadResponse
from thinktank.uploads import UploadKind, UploadService
from thinktank.uploads.upload_service import max_bytes_for

router = APIRouter()


@router.post("/{kind}", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_image(
    request: Request,
    kind: UploadKind,
    caller: MemberCaller,
    db: DbSession,
    file: UploadFile = File(...),
    publication_id: Optional[int] = Form(None),
):
    # At most one byte past the ceiling is read into memory
    data = await file.read(max_bytes_for(kind, get_settings()) + 1)
    result = await UploadService(db).upload(
        caller,
        kind,
        file.filename or "upload",
        file.content_type,
        data,
        publication_id=publication_id,
        ip_address=get_client_ip(request),
    )
    return UploadResponse(
        url=result.url,
        kind=result.kind.value,
        size=result.size,
        content_type=result.content_type or "",
    )
