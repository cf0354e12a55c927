"""002: create bids table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # vendor_id is copied from the product at bid time and never re-resolved
    op.execute("""
        CREATE TABLE bids (
            id                  VARCHAR(40)     PRIMARY KEY,
            product_id          VARCHAR(40)     NOT NULL REFERENCES products(id),
            buyer_id            VARCHAR(64)     NOT NULL,
            vendor_id           VARCHAR(64)     NOT NULL,
            buyer_type          VARCHAR(3)      NOT NULL,
            amount              NUMERIC(12, 2)  NOT NULL,
            quantity            INT             NOT NULL,
            total_amount        NUMERIC(24, 2)  NOT NULL,
            unit                VARCHAR(16)     NOT NULL,
            message             TEXT,
            voice_message_ref   TEXT,
            delivery_location   JSONB,
            vendor_message      TEXT,
            counter_offer       JSONB,
            status              VARCHAR(16)     NOT NULL DEFAULT 'pending',
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            expires_at          TIMESTAMPTZ     NOT NULL,
            CONSTRAINT ck_bids_quantity_gt_0 CHECK (quantity > 0),
            CONSTRAINT ck_bids_amount_gt_0 CHECK (amount > 0),
            CONSTRAINT ck_bids_total_amount CHECK (total_amount = amount * quantity),
            CONSTRAINT ck_bids_buyer_type CHECK (buyer_type IN ('B2B', 'B2C')),
            CONSTRAINT ck_bids_status CHECK (
                status IN ('pending', 'accepted', 'rejected', 'completed', 'cancelled')
            )
        );
    """)
    op.execute("CREATE INDEX idx_bids_product ON bids (product_id, created_at DESC);")
    op.execute("CREATE INDEX idx_bids_buyer ON bids (buyer_id, created_at DESC);")
    op.execute("CREATE INDEX idx_bids_vendor ON bids (vendor_id, created_at DESC);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS bids CASCADE;")
