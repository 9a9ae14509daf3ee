"""
Request correlation middleware.

Every request carries an id (the client's X-Request-ID, or a fresh UUID).
It is stored on ``request.state``, echoed in the response header and set on
the logging context var so every log line of the request includes it.
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from thinktank.logging_config import get_logger, request_id_var

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
SLOW_REQUEST_MS = 1000
MAX_INCOMING_ID_LENGTH = 128


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        incoming = request.headers.get(REQUEST_ID_HEADER, "")
        if incoming and len(incoming) <= MAX_INCOMING_ID_LENGTH:
            request_id = incoming
        else:
            request_id = str(uuid.uuid4())

        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        start = time.perf_counter()
        try:
            response = await call_next(request)
            duration_ms = round((time.perf_counter() - start) * 1000, 1)
            response.headers[REQUEST_ID_HEADER] = request_id

            fields = {
                "path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            }
            if duration_ms > SLOW_REQUEST_MS:
                logger.warning("Slow request", extra=fields)
            else:
                logger.debug("Request handled", extra=fields)
            return response
        finally:
            request_id_var.reset(token)
