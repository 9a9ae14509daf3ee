"""
HTTP client for the object storage service.

The service accepts one multipart file per request and answers with
``{"url": "<stable public url>"}``.
"""

from typing import Optional

import httpx

from thinktank.config import get_settings
from thinktank.kernel.errors import UpstreamError
from thinktank.logging_config import get_logger

logger = get_logger(__name__)


class ObjectStorageClient:
    """
    Usage:
        storage = ObjectStorageClient()
        url = await storage.put("avatar", "me.png", "image/png", data)

    ``transport`` is passed through to ``httpx.AsyncClient`` (tests use
    ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = base_url or settings.object_storage_url
        self.token = token if token is not None else settings.object_storage_token
        self.timeout = timeout or settings.object_storage_timeout_seconds
        self.transport = transport

    async def put(self, kind: str, filename: str, content_type: str, data: bytes) -> str:
        """Store one file and return its URL. Any failure raises UpstreamError; no retry."""
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.base_url,
                    headers=headers,
                    data={"kind": kind},
                    files={"file": (filename, data, content_type)},
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Object storage rejected upload",
                extra={"status_code": e.response.status_code, "kind": kind},
            )
            raise UpstreamError("Object storage rejected the upload") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Object storage request failed: %s", e, extra={"kind": kind})
            raise UpstreamError("Object storage is unavailable") from e

        url = payload.get("url") if isinstance(payload, dict) else None
        if not url:
            logger.warning("Object storage response had no url", extra={"kind": kind})
            raise UpstreamError("Object storage returned no URL")
        return url
