"""ApiResponse envelope shared by every endpoint.

    {"code": 0, "message": "Bid placed", "data": {...},
     "timestamp": "2026-03-01T09:00:00+00:00", "request_id": "req_..."}

code 0 is success; any other value is an AppError code (see errors.py) and
`data` is null.
"""

import uuid
from typing import Any

from fastapi import Request
from pydantic import BaseModel, Field

from src.mandi_common.datetime_utils import utc_now


def _new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    request_id: str = Field(default_factory=_new_request_id)


def success_response(data: Any = None, message: str = "success") -> ApiResponse:
    return ApiResponse(code=0, message=message, data=data)


def error_response(code: int, message: str, request_id: str | None = None) -> ApiResponse:
    return ApiResponse(
        code=code, message=message, data=None, request_id=request_id or _new_request_id()
    )


def request_response(request: Request, data: Any = None, message: str = "success") -> ApiResponse:
    """Success envelope carrying the request id set by RequestLogMiddleware."""
    return ApiResponse(
        data=data,
        message=message,
        request_id=getattr(request.state, "request_id", None) or _new_request_id(),
    )
