"""003: create products table

Revision ID: 003
Revises: 002
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE products (
            id                          VARCHAR(64)     PRIMARY KEY,
            name                        VARCHAR(255)    NOT NULL,
            description                 TEXT,
            category                    VARCHAR(100),
            type                        VARCHAR(20)     NOT NULL,
            status                      VARCHAR(20)     NOT NULL DEFAULT 'ACTIVE',
            price_cents                 BIGINT,
            stock_quantity              INT,
            starting_price_cents        BIGINT,
            current_highest_bid_cents   BIGINT,
            auction_end_time            TIMESTAMPTZ,
            created_at                  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at                  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_products_type     CHECK (type IN ('FIXED_PRICE', 'AUCTION')),
            CONSTRAINT ck_products_status   CHECK (
                status IN ('ACTIVE', 'INACTIVE', 'SOLD', 'EXPIRED', 'CONCLUDED')
            ),
            CONSTRAINT ck_products_price_gte_0   CHECK (price_cents IS NULL OR price_cents >= 0),
            CONSTRAINT ck_products_stock_gte_0   CHECK (stock_quantity IS NULL OR stock_quantity >= 0),
            CONSTRAINT ck_products_fixed_fields  CHECK (
                type <> 'FIXED_PRICE' OR (price_cents IS NOT NULL AND stock_quantity IS NOT NULL)
            ),
            CONSTRAINT ck_products_auction_fields CHECK (
                type <> 'AUCTION' OR (
                    starting_price_cents IS NOT NULL
                    AND starting_price_cents > 0
                    AND auction_end_time IS NOT NULL
                )
            ),
            CONSTRAINT ck_products_highest_bid CHECK (
                current_highest_bid_cents IS NULL
                OR current_highest_bid_cents >= starting_price_cents
            )
        );
    """)
    op.execute("""
        CREATE INDEX idx_products_auction_due
        ON products (auction_end_time)
        WHERE type = 'AUCTION' AND status = 'ACTIVE';
    """)
    op.execute("CREATE INDEX idx_products_type_status ON products (type, status);")
    op.execute("""
        CREATE TRIGGER trg_products_updated_at
            BEFORE UPDATE ON products
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS products CASCADE;")
