"""Request logging middleware.

One line per request: method, path, status, latency and request id. The id
is taken from an incoming X-Request-ID header when the caller (API gateway,
mobile app) supplies a sane one, otherwise generated. It is put on
request.state for ApiResponse and echoed back in the X-Request-ID header.

    INFO  [PUT] /api/v1/bids/bid_3f2a... → 200 (23ms) req_a1b2c3d4e5f6
    WARN  [PUT] /api/v1/bids/bid_3f2a... → 409 (4ms) req_...
"""

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("mandi.request")

_REQUEST_ID_HEADER = "X-Request-ID"
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9_\-]{8,64}$")


def _request_id(request: Request) -> str:
    incoming = request.headers.get(_REQUEST_ID_HEADER, "")
    if _VALID_REQUEST_ID.match(incoming):
        return incoming
    return f"req_{uuid.uuid4().hex[:12]}"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.request_id = _request_id(request)

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(
            level,
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request.state.request_id,
        )
        response.headers[_REQUEST_ID_HEADER] = request.state.request_id
        return response
