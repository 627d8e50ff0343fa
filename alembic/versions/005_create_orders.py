"""005: create orders and order_items tables

Revision ID: 005
Revises: 004
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE orders (
            id                  VARCHAR(64)     PRIMARY KEY,
            user_id             UUID            NOT NULL REFERENCES users (id),
            total_amount_cents  BIGINT          NOT NULL,
            status              VARCHAR(20)     NOT NULL DEFAULT 'PENDING_PAYMENT',
            invoice_id          VARCHAR(64),
            payment_id          VARCHAR(128),
            payment_url         TEXT,
            shipping_address    TEXT,
            notes               TEXT,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_orders_total_gte_0 CHECK (total_amount_cents >= 0),
            CONSTRAINT ck_orders_status      CHECK (
                status IN ('PENDING_PAYMENT', 'PAID', 'FAILED', 'CANCELLED', 'SHIPPED', 'DELIVERED')
            )
        );
    """)
    op.execute("CREATE INDEX idx_orders_user_status ON orders (user_id, status, created_at DESC);")
    op.execute("CREATE INDEX idx_orders_invoice ON orders (invoice_id) WHERE invoice_id IS NOT NULL;")
    op.execute("""
        CREATE TRIGGER trg_orders_updated_at
            BEFORE UPDATE ON orders
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)

    op.execute("""
        CREATE TABLE order_items (
            id                  VARCHAR(64)     PRIMARY KEY,
            order_id            VARCHAR(64)     NOT NULL REFERENCES orders (id) ON DELETE CASCADE,
            product_id          VARCHAR(64)     NOT NULL REFERENCES products (id),
            quantity            INT             NOT NULL,
            unit_price_cents    BIGINT          NOT NULL,
            total_price_cents   BIGINT          NOT NULL,
            CONSTRAINT ck_order_items_quantity_gt_0 CHECK (quantity > 0),
            CONSTRAINT ck_order_items_unit_gte_0    CHECK (unit_price_cents >= 0),
            CONSTRAINT ck_order_items_total         CHECK (total_price_cents = unit_price_cents * quantity)
        );
    """)
    op.execute("CREATE INDEX idx_order_items_order ON order_items (order_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS order_items CASCADE;")
    op.execute("DROP TABLE IF EXISTS orders CASCADE;")
