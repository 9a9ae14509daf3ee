"""
Image uploads: validation, forwarding to object storage and the
completion update on the owning record.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from thinktank.config import Settings, get_settings
from thinktank.content.repository import ContentRepository
from thinktank.kernel.audit import AuditStore
from thinktank.kernel.errors import ValidationError
from thinktank.kernel.identity.caller import Caller
from thinktank.kernel.identity.identity_service import IdentityService
from thinktank.kernel.models.audit_log import AuditAction
from thinktank.kernel.models.publication import Publication
from thinktank.kernel.permissions import ensure_editable, ensure_member
from thinktank.logging_config import get_logger
from thinktank.uploads.storage_client import ObjectStorageClient

logger = get_logger(__name__)


class UploadKind(str, Enum):
    AVATAR = "avatar"
    THUMBNAIL = "thumbnail"
    CONTENT_IMAGE = "content-image"


@dataclass
class UploadResult:
    url: str
    kind: UploadKind
    size: int
    content_type: str


def max_bytes_for(kind: UploadKind, settings: Settings) -> int:
    return {
        UploadKind.AVATAR: settings.avatar_max_bytes,
        UploadKind.THUMBNAIL: settings.thumbnail_max_bytes,
        UploadKind.CONTENT_IMAGE: settings.content_image_max_bytes,
    }[kind]


def validate_image(kind: UploadKind, content_type: Optional[str], size: int, settings: Settings) -> None:
    errors = []
    if not (content_type or "").lower().startswith("image/"):
        errors.append({"field": "file", "message": "Only image uploads are accepted"})
    if size == 0:
        errors.append({"field": "file", "message": "File is empty"})
    limit = max_bytes_for(kind, settings)
    if size > limit:
        errors.append({
            "field": "file",
            "message": f"File exceeds the {limit // (1024 * 1024)}MB limit for {kind.value} uploads",
        })
    if errors:
        raise ValidationError("Invalid upload", errors=errors)


class UploadService:
    """
    Usage:
        service = UploadService(session)
        result = await service.upload(caller, UploadKind.AVATAR, "me.png", "image/png", data)
    """

    def __init__(
        self,
        session: AsyncSession,
        storage: Optional[ObjectStorageClient] = None,
        settings: Optional[Settings] = None,
    ):
        self.session = session
        self.storage = storage or ObjectStorageClient()
        self.settings = settings or get_settings()
        self.audit = AuditStore(session)

    async def upload(
        self,
        caller: Caller,
        kind: UploadKind,
        filename: str,
        content_type: Optional[str],
        data: bytes,
        publication_id: Optional[int] = None,
        ip_address: Optional[str] = None,
    ) -> UploadResult:
        """
        Validate, store and attach an image.

        Avatars replace the caller's ``avatar_url``. A thumbnail with
        ``publication_id`` replaces that publication's ``thumbnail_url``,
        subject to the usual edit rules, which are checked before anything
        is sent to storage.
        """
        ensure_member(caller)
        validate_image(kind, content_type, len(data), self.settings)

        repository = ContentRepository(self.session, Publication, "publication")
        publication = None
        if kind == UploadKind.THUMBNAIL and publication_id is not None:
            publication = await repository.get_by_id(publication_id)
            ensure_editable(caller, publication, "Publication")

        url = await self.storage.put(kind.value, filename or "upload", content_type, data)

        if kind == UploadKind.AVATAR:
            await IdentityService(self.session).set_avatar(caller.profile_id, url)
        elif publication is not None:
            await repository.update(publication, {"thumbnail_url": url})

        await self.audit.log(
            action=AuditAction.UPLOAD_COMPLETED,
            entity_type="publication" if publication is not None else "profile",
            entity_id=publication.id if publication is not None else caller.profile_id,
            actor_id=caller.profile_id,
            payload={"kind": kind.value, "size": len(data), "url": url},
            ip_address=ip_address,
        )
        logger.info(
            "Upload completed",
            extra={"kind": kind.value, "size": len(data), "profile_id": caller.profile_id},
        )
        return UploadResult(url=url, kind=kind, size=len(data), content_type=content_type)
