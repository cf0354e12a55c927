# src/mandi_store/application/service.py
from config.settings import settings
from src.mandi_store.domain.store import StoreProtocol

_store: StoreProtocol | None = None


def get_store() -> StoreProtocol:
    """Process-wide store for the configured backend, created on first use."""
    global _store  # noqa: PLW0603
    if _store is None:
        if settings.STORE_BACKEND == "memory":
            from src.mandi_store.infrastructure.memory_store import InMemoryStore

            _store = InMemoryStore()
        else:
            from src.mandi_store.infrastructure.sql_store import SqlStore

            _store = SqlStore()
    return _store
