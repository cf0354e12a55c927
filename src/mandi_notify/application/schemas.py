from typing import Any

from pydantic import BaseModel

from src.mandi_notify.domain.models import Notification


class NotificationItem(BaseModel):
    id: str
    type: str
    payload: dict[str, Any]
    created_at: str
    expires_at: str

    @classmethod
    def from_domain(cls, n: Notification) -> "NotificationItem":
        return cls(
            id=n.id,
            type=n.type,
            payload=n.payload,
            created_at=n.created_at.isoformat(),
            expires_at=n.expires_at.isoformat(),
        )


class NotificationListResponse(BaseModel):
    items: list[NotificationItem]
    next_cursor: str | None
    has_more: bool
