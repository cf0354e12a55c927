"""Opaque cursor for newest-first lists.

Cursor format: {"ts": "<created_at ISO>", "id": "<row id>"} as Base64 JSON.
An undecodable cursor, or one whose timestamp carries no UTC offset, restarts
from the first page.
"""

import base64
import binascii
import json
from datetime import datetime


def cursor_encode(created_at: datetime, row_id: str) -> str:
    """Encode composite cursor from the last row of a page."""
    payload = {"ts": created_at.isoformat(), "id": row_id}
    return base64.urlsafe_b64encode(json.dumps(payload).encode()).decode()


def cursor_decode(cursor: str | None) -> tuple[datetime, str] | None:
    """Decode composite cursor -> (created_at, id), or None when absent/invalid."""
    if not cursor:
        return None
    try:
        data = json.loads(base64.urlsafe_b64decode(cursor.encode()).decode())
        created_at = datetime.fromisoformat(data["ts"])
        row_id = str(data["id"])
    except (binascii.Error, UnicodeDecodeError, ValueError, KeyError, TypeError):
        return None
    # Stored timestamps are aware; a naive one cannot be ordered against them
    if created_at.tzinfo is None:
        return None
    return created_at, row_id
