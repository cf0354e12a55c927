"""mandi_notify REST endpoints.

GET /notifications: the caller's inbox, newest first, cursor pagination
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from src.mandi_common.response import ApiResponse, request_response
from src.mandi_gateway.auth.dependencies import CurrentUser, get_current_user
from src.mandi_notify.application.service import Notifier, get_notifier

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=ApiResponse)
async def list_notifications(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    notifier: Annotated[Notifier, Depends(get_notifier)],
    limit: int = Query(20, ge=1, le=100),
    cursor: str | None = Query(None),
) -> ApiResponse:
    result = await notifier.list_notifications(current_user.user_id, cursor, limit)
    return request_response(request, result.model_dump(mode="json"))
