"""001: create products table

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE products (
            id                  VARCHAR(40)     PRIMARY KEY,
            vendor_id           VARCHAR(64)     NOT NULL,
            title               TEXT            NOT NULL,
            category            VARCHAR(32),
            unit                VARCHAR(16)     NOT NULL,
            pricing             JSONB           NOT NULL,
            quantity_available  INT             NOT NULL,
            status              VARCHAR(16)     NOT NULL DEFAULT 'active',
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_products_quantity_gte_0 CHECK (quantity_available >= 0),
            CONSTRAINT ck_products_status CHECK (status IN ('active', 'deleted'))
        );
    """)
    op.execute("CREATE INDEX idx_products_vendor ON products (vendor_id, created_at DESC);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS products CASCADE;")
