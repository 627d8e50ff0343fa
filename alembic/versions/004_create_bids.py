"""004: create bids table

Revision ID: 004
Revises: 003
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE bids (
            id              VARCHAR(64)     PRIMARY KEY,
            product_id      VARCHAR(64)     NOT NULL REFERENCES products (id) ON DELETE CASCADE,
            user_id         UUID            NOT NULL REFERENCES users (id),
            amount_cents    BIGINT          NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_bids_amount_gt_0 CHECK (amount_cents > 0)
        );
    """)
    # Winner lookup: highest amount, earliest first
    op.execute("""
        CREATE INDEX idx_bids_product_ranking
        ON bids (product_id, amount_cents DESC, created_at ASC);
    """)
    op.execute("CREATE INDEX idx_bids_user ON bids (user_id, created_at DESC);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS bids CASCADE;")
