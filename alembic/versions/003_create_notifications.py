"""003: create notifications table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE notifications (
            id          VARCHAR(40)     PRIMARY KEY,
            user_id     VARCHAR(64)     NOT NULL,
            type        VARCHAR(32)     NOT NULL,
            payload     JSONB           NOT NULL,
            created_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            expires_at  TIMESTAMPTZ     NOT NULL,
            CONSTRAINT ck_notifications_type CHECK (type IN ('new_bid', 'bid_status_update'))
        );
    """)
    op.execute(
        "CREATE INDEX idx_notifications_user ON notifications (user_id, created_at DESC);"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS notifications CASCADE;")
