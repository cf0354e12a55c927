"""Domain models for mandi_notify."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class NotificationEvent:
    """What happened, as delivered to a user's inbox. Payload must be JSON-safe."""

    type: str  # new_bid / bid_status_update
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass
class Notification:
    id: str
    user_id: str
    type: str
    payload: dict[str, Any]
    created_at: datetime
    expires_at: datetime  # retention TTL; expired entries are never listed
