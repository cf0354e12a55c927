"""SQLAlchemy table models backing the SQL store.

SqlStore works on `Model.__table__` with Core statements; Alembic migrations
(alembic/versions/) are the authoritative DDL for PostgreSQL. The models are
also used by `Base.metadata.create_all` in tests.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, CheckConstraint, DateTime, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.mandi_common.database import Base


class ProductORM(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("quantity_available >= 0", name="ck_products_quantity_gte_0"),
        CheckConstraint("status IN ('active', 'deleted')", name="ck_products_status"),
        Index("idx_products_vendor", "vendor_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(40), primary_key=True)
    vendor_id: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str | None] = mapped_column(String(32))
    unit: Mapped[str] = mapped_column(String(16), nullable=False)
    pricing: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    quantity_available: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class BidORM(Base):
    __tablename__ = "bids"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_bids_quantity_gt_0"),
        CheckConstraint("amount > 0", name="ck_bids_amount_gt_0"),
        CheckConstraint("buyer_type IN ('B2B', 'B2C')", name="ck_bids_buyer_type"),
        CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected', 'completed', 'cancelled')",
            name="ck_bids_status",
        ),
        Index("idx_bids_product", "product_id", "created_at"),
        Index("idx_bids_buyer", "buyer_id", "created_at"),
        Index("idx_bids_vendor", "vendor_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(40), primary_key=True)
    product_id: Mapped[str] = mapped_column(String(40), nullable=False)
    buyer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    vendor_id: Mapped[str] = mapped_column(String(64), nullable=False)
    buyer_type: Mapped[str] = mapped_column(String(3), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(24, 2), nullable=False)
    unit: Mapped[str] = mapped_column(String(16), nullable=False)
    message: Mapped[str | None] = mapped_column(Text)
    voice_message_ref: Mapped[str | None] = mapped_column(Text)
    delivery_location: Mapped[dict[str, Any] | None] = mapped_column(JSON)
    vendor_message: Mapped[str | None] = mapped_column(Text)
    counter_offer: Mapped[dict[str, Any] | None] = mapped_column(JSON)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class NotificationORM(Base):
    __tablename__ = "notifications"
    __table_args__ = (
        Index("idx_notifications_user", "user_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(40), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
