"""Image uploads forwarded to object storage."""

from thinktank.uploads.storage_client import ObjectStorageClient
from thinktank.uploads.upload_service import UploadKind, UploadResult, UploadService, validate_image

__all__ = [
    "ObjectStorageClient",
    "UploadKind",
    "UploadResult",
    "UploadService",
    "validate_image",
]
