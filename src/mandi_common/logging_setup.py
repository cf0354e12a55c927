"""Log setup: one KVFormatter handler on the root logger."""

import logging
import sys

_EXTRA_KEYS = (
    "bid_id",
    "product_id",
    "user_id",
    "actor_id",
    "from_status",
    "to_status",
    "quantity",
    "event",
)


class KVFormatter(logging.Formatter):
    """Classic human-readable line with known `extra=` fields appended as key=value."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        parts = [
            f"{key}={getattr(record, key)}"
            for key in _EXTRA_KEYS
            if getattr(record, key, None) is not None
        ]
        if parts:
            return f"{base} | {' '.join(parts)}"
        return base


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Configure root logger with KVFormatter. Safe to call multiple times."""
    root = logging.getLogger()
    root.setLevel(level)

    # Drop existing handlers to avoid duplicates on reloads
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(KVFormatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    return root
