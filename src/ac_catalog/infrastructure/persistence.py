"""ProductRepository: concrete implementation of ProductRepositoryProtocol.

All queries use raw text() SQL (no ORM).
Mutations are guarded conditional UPDATEs; a rowcount of 0 means the guard
failed (stale highest bid, auction no longer ACTIVE, not enough stock).

Transaction ownership: the CALLER (application service) begins and commits.
`get_for_update` must run inside that transaction for its row lock to hold.
"""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ac_catalog.domain.models import Product

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_SELECT_COLUMNS = """
    id, name, description, category, type, status,
    price_cents, stock_quantity,
    starting_price_cents, current_highest_bid_cents, auction_end_time,
    created_at, updated_at
"""

_GET_PRODUCT_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM products
    WHERE id = :product_id
""")

_GET_PRODUCT_FOR_UPDATE_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM products
    WHERE id = :product_id
    FOR UPDATE
""")

_LIST_ENDED_AUCTIONS_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM products
    WHERE type = 'AUCTION'
      AND status = 'ACTIVE'
      AND auction_end_time <= :now
    ORDER BY auction_end_time ASC, id ASC
""")

_RAISE_HIGHEST_BID_SQL = text("""
    UPDATE products
    SET current_highest_bid_cents = :amount, updated_at = NOW()
    WHERE id = :product_id
      AND status = 'ACTIVE'
      AND COALESCE(current_highest_bid_cents, starting_price_cents) < :amount
      AND starting_price_cents < :amount
""")

_SET_HIGHEST_BID_SQL = text("""
    UPDATE products
    SET current_highest_bid_cents = :amount, updated_at = NOW()
    WHERE id = :product_id
""")

_CLOSE_AUCTION_SQL = text("""
    UPDATE products
    SET status = :new_status, updated_at = NOW()
    WHERE id = :product_id AND type = 'AUCTION' AND status = 'ACTIVE'
""")

_DECREMENT_STOCK_SQL = text("""
    UPDATE products
    SET stock_quantity = stock_quantity - :quantity, updated_at = NOW()
    WHERE id = :product_id AND stock_quantity >= :quantity
""")

_COUNT_AUCTIONS_SQL = text("""
    SELECT status, COUNT(*) AS total
    FROM products
    WHERE type = 'AUCTION'
    GROUP BY status
""")

# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_product(row: object) -> Product:
    return Product(
        id=row.id,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        category=row.category,  # type: ignore[attr-defined]
        type=row.type,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        price_cents=row.price_cents,  # type: ignore[attr-defined]
        stock_quantity=row.stock_quantity,  # type: ignore[attr-defined]
        starting_price_cents=row.starting_price_cents,  # type: ignore[attr-defined]
        current_highest_bid_cents=row.current_highest_bid_cents,  # type: ignore[attr-defined]
        auction_end_time=row.auction_end_time,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ProductRepository:
    async def get_by_id(self, db: AsyncSession, product_id: str) -> Product | None:
        result = await db.execute(_GET_PRODUCT_SQL, {"product_id": product_id})
        row = result.fetchone()
        return _row_to_product(row) if row else None

    async def get_for_update(self, db: AsyncSession, product_id: str) -> Product | None:
        """Row-locking read; the lock is the serialisation point for bid races."""
        result = await db.execute(_GET_PRODUCT_FOR_UPDATE_SQL, {"product_id": product_id})
        row = result.fetchone()
        return _row_to_product(row) if row else None

    async def list_ended_auctions(self, db: AsyncSession, now: datetime) -> list[Product]:
        result = await db.execute(_LIST_ENDED_AUCTIONS_SQL, {"now": now})
        return [_row_to_product(row) for row in result.fetchall()]

    async def raise_highest_bid(
        self, db: AsyncSession, product_id: str, amount_cents: int
    ) -> bool:
        """Compare-and-swap: only succeeds while `amount` beats the stored highest bid."""
        result = await db.execute(
            _RAISE_HIGHEST_BID_SQL, {"product_id": product_id, "amount": amount_cents}
        )
        return bool(result.rowcount)  # type: ignore[attr-defined]

    async def set_highest_bid(
        self, db: AsyncSession, product_id: str, amount_cents: int
    ) -> None:
        await db.execute(
            _SET_HIGHEST_BID_SQL, {"product_id": product_id, "amount": amount_cents}
        )

    async def close_auction(
        self, db: AsyncSession, product_id: str, new_status: str
    ) -> bool:
        """ACTIVE -> EXPIRED/CONCLUDED. False when the auction was already closed."""
        result = await db.execute(
            _CLOSE_AUCTION_SQL, {"product_id": product_id, "new_status": new_status}
        )
        return bool(result.rowcount)  # type: ignore[attr-defined]

    async def decrement_stock(
        self, db: AsyncSession, product_id: str, quantity: int
    ) -> bool:
        result = await db.execute(
            _DECREMENT_STOCK_SQL, {"product_id": product_id, "quantity": quantity}
        )
        return bool(result.rowcount)  # type: ignore[attr-defined]

    async def count_auctions_by_status(self, db: AsyncSession) -> dict[str, int]:
        result = await db.execute(_COUNT_AUCTIONS_SQL)
        return {row.status: int(row.total) for row in result.fetchall()}
