"""Unit tests for Notifier: best-effort delivery and the inbox read."""

import logging
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

from src.mandi_common.datetime_utils import utc_now
from src.mandi_common.errors import StoreUnavailableError
from src.mandi_notify.application.service import Notifier
from src.mandi_notify.domain.models import NotificationEvent


def _event(n: int = 0) -> NotificationEvent:
    return NotificationEvent(type="new_bid", payload={"bid_id": f"bid_{n}"})


async def test_notify_writes_inbox_entry_with_ttl(notifier, notifications) -> None:
    await notifier.notify("vendor-1", _event())

    page = await notifier.list_notifications("vendor-1", None, 20)

    assert len(page.items) == 1
    item = page.items[0]
    assert item.type == "new_bid"
    assert item.payload == {"bid_id": "bid_0"}
    assert item.id.startswith("ntf_")
    long_ago = utc_now() - timedelta(days=365)
    stored = (await notifications.list_for_user("vendor-1", long_ago, None, 1))[0]
    assert stored.expires_at - stored.created_at == timedelta(hours=24)


async def test_notify_swallows_and_logs_failures(caplog) -> None:
    repo = MagicMock()
    repo.save = AsyncMock(side_effect=StoreUnavailableError())
    notifier = Notifier(repo)

    with caplog.at_level(logging.ERROR):
        await notifier.notify("vendor-1", _event())

    assert "Notification delivery failed" in caplog.text


async def test_expired_entries_are_hidden(notifications) -> None:
    notifier = Notifier(notifications, ttl=timedelta(seconds=-1))
    await notifier.notify("vendor-1", _event())

    page = await notifier.list_notifications("vendor-1", None, 20)

    assert page.items == []


async def test_inbox_is_per_user(notifier) -> None:
    await notifier.notify("vendor-1", _event(1))
    await notifier.notify("buyer-1", _event(2))

    page = await notifier.list_notifications("buyer-1", None, 20)

    assert [i.payload["bid_id"] for i in page.items] == ["bid_2"]


async def test_pagination(notifier) -> None:
    for n in range(5):
        await notifier.notify("vendor-1", _event(n))

    first = await notifier.list_notifications("vendor-1", None, 3)
    second = await notifier.list_notifications("vendor-1", first.next_cursor, 3)

    assert first.has_more is True
    assert len(first.items) == 3
    assert second.has_more is False
    assert second.next_cursor is None
    ids = [i.id for i in first.items + second.items]
    assert len(set(ids)) == 5
