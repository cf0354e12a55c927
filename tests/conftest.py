"""Shared test fixtures.

Tests run against the in-memory store unless a test overrides `store` with
`sql_store`; the environment is set before any
`config.settings` import so Settings() validates without a .env file.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ.setdefault("STORE_BACKEND", "memory")

from collections.abc import AsyncIterator, Awaitable, Callable
from decimal import Decimal
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.main import app
from src.mandi_bidding.application.service import BidLedgerService, get_bid_ledger
from src.mandi_bidding.infrastructure.persistence import BidRepository
from src.mandi_catalog.api.router import get_product_service
from src.mandi_catalog.application.service import ProductApplicationService
from src.mandi_catalog.domain.models import Pricing, Product, RetailTier, WholesaleTier
from src.mandi_catalog.infrastructure.persistence import ProductCatalog
from src.mandi_common.database import Base
from src.mandi_common.datetime_utils import utc_now
from src.mandi_common.enums import UserRole
from src.mandi_common.id_generator import new_product_id
from src.mandi_gateway.auth.dependencies import CurrentUser
from src.mandi_notify.application.service import Notifier, get_notifier
from src.mandi_notify.infrastructure.persistence import NotificationRepository
from src.mandi_store.domain.store import StoreProtocol
from src.mandi_store.infrastructure.memory_store import InMemoryStore
from src.mandi_store.infrastructure.sql_store import SqlStore

_VENDOR_ID = "vendor-1"


@pytest.fixture
def vendor() -> CurrentUser:
    return CurrentUser(user_id=_VENDOR_ID, role=UserRole.VENDOR)


@pytest.fixture
def other_vendor() -> CurrentUser:
    return CurrentUser(user_id="vendor-2", role=UserRole.VENDOR)


@pytest.fixture
def b2b_buyer() -> CurrentUser:
    return CurrentUser(user_id="buyer-1", role=UserRole.B2B_BUYER)


@pytest.fixture
def b2c_buyer() -> CurrentUser:
    return CurrentUser(user_id="buyer-2", role=UserRole.B2C_BUYER)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
async def sql_store() -> AsyncIterator[SqlStore]:
    """SqlStore on a private in-memory SQLite database with tables created from metadata."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield SqlStore(async_sessionmaker(engine, expire_on_commit=False))
    await engine.dispose()


@pytest.fixture
def catalog(store: StoreProtocol) -> ProductCatalog:
    return ProductCatalog(store)


@pytest.fixture
def notifications(store: StoreProtocol) -> NotificationRepository:
    return NotificationRepository(store)


@pytest.fixture
def notifier(notifications: NotificationRepository) -> Notifier:
    return Notifier(notifications)


@pytest.fixture
def bids(store: StoreProtocol) -> BidRepository:
    return BidRepository(store)


@pytest.fixture
def ledger(bids: BidRepository, catalog: ProductCatalog, notifier: Notifier) -> BidLedgerService:
    return BidLedgerService(bids, catalog, notifier)


@pytest.fixture
def make_product(catalog: ProductCatalog) -> Callable[..., Awaitable[Product]]:
    """Persist a product: 100 kg, wholesale ₹45 (min 50), retail ₹60, owned by vendor-1."""

    async def _make(**kwargs: Any) -> Product:
        now = utc_now()
        defaults: dict[str, Any] = dict(
            id=new_product_id(),
            vendor_id=_VENDOR_ID,
            title="Basmati Rice",
            category="grains",
            unit="kg",
            pricing=Pricing(
                wholesale=WholesaleTier(price=Decimal("45.00"), min_quantity=50),
                retail=RetailTier(price=Decimal("60.00")),
            ),
            quantity_available=100,
            status="active",
            created_at=now,
            updated_at=now,
        )
        defaults.update(kwargs)
        product = Product(**defaults)
        await catalog.save_product(product)
        return product

    return _make


@pytest.fixture
async def client(
    ledger: BidLedgerService, catalog: ProductCatalog, notifier: Notifier
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client wired to a fresh in-memory store."""
    app.dependency_overrides[get_bid_ledger] = lambda: ledger
    app.dependency_overrides[get_product_service] = lambda: ProductApplicationService(catalog)
    app.dependency_overrides[get_notifier] = lambda: notifier
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
