"""NotificationRepository: user inbox entries on top of the Store."""

from datetime import datetime
from typing import Any

from src.mandi_notify.domain.models import Notification
from src.mandi_store.domain.store import NOTIFICATIONS, Condition, StartKey, StoreProtocol


def _item_to_notification(item: dict[str, Any]) -> Notification:
    return Notification(
        id=item["id"],
        user_id=item["user_id"],
        type=item["type"],
        payload=dict(item["payload"] or {}),
        created_at=item["created_at"],
        expires_at=item["expires_at"],
    )


class NotificationRepository:
    def __init__(self, store: StoreProtocol) -> None:
        self._store = store

    async def save(self, notification: Notification) -> None:
        await self._store.put(
            NOTIFICATIONS,
            {
                "id": notification.id,
                "user_id": notification.user_id,
                "type": notification.type,
                "payload": notification.payload,
                "created_at": notification.created_at,
                "expires_at": notification.expires_at,
            },
        )

    async def list_for_user(
        self,
        user_id: str,
        now: datetime,
        start_after: StartKey | None,
        limit: int,
    ) -> list[Notification]:
        items = await self._store.query(
            NOTIFICATIONS,
            "user",
            user_id,
            filters=[Condition("expires_at", "gt", now)],
            start_after=start_after,
            limit=limit,
        )
        return [_item_to_notification(item) for item in items]
