"""Notifier: fire-and-forget inbox delivery.

`notify` is called only after the state it describes has been committed.
It never raises: a failed inbox write is logged with its traceback and
dropped, so bid placement and status updates cannot fail or roll back
because of it. There is no retry; the inbox is best-effort.
"""

import logging
from datetime import timedelta

from config.settings import settings
from src.mandi_common.datetime_utils import utc_now
from src.mandi_common.id_generator import new_notification_id
from src.mandi_common.pagination import cursor_decode, cursor_encode
from src.mandi_notify.application.schemas import NotificationItem, NotificationListResponse
from src.mandi_notify.domain.models import Notification, NotificationEvent
from src.mandi_notify.infrastructure.persistence import NotificationRepository
from src.mandi_store.application.service import get_store
from src.mandi_store.domain.store import StartKey

logger = logging.getLogger(__name__)


class Notifier:
    def __init__(self, repo: NotificationRepository, ttl: timedelta | None = None) -> None:
        self._repo = repo
        self._ttl = ttl or timedelta(hours=settings.NOTIFICATION_TTL_HOURS)

    async def notify(self, user_id: str, event: NotificationEvent) -> None:
        now = utc_now()
        notification = Notification(
            id=new_notification_id(),
            user_id=user_id,
            type=event.type,
            payload=event.payload,
            created_at=now,
            expires_at=now + self._ttl,
        )
        try:
            await self._repo.save(notification)
        except Exception:
            logger.exception(
                "Notification delivery failed",
                extra={"user_id": user_id, "event": event.type},
            )
            return
        logger.info("Notification queued", extra={"user_id": user_id, "event": event.type})

    async def list_notifications(
        self, user_id: str, cursor: str | None, limit: int
    ) -> NotificationListResponse:
        decoded = cursor_decode(cursor)
        start_after = StartKey(*decoded) if decoded else None
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        rows = await self._repo.list_for_user(user_id, utc_now(), start_after, limit + 1)
        has_more = len(rows) > limit
        page = rows[:limit]
        next_cursor = (
            cursor_encode(page[-1].created_at, page[-1].id) if has_more and page else None
        )
        return NotificationListResponse(
            items=[NotificationItem.from_domain(n) for n in page],
            next_cursor=next_cursor,
            has_more=has_more,
        )


_notifier: Notifier | None = None


def get_notifier() -> Notifier:
    global _notifier  # noqa: PLW0603
    if _notifier is None:
        _notifier = Notifier(NotificationRepository(get_store()))
    return _notifier
