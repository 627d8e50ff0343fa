# src/ac_auction/infrastructure/persistence.py
"""BidRepository: raw SQL persistence implementation."""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ac_auction.domain.models import Bid

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_INSERT_BID_SQL = text("""
    INSERT INTO bids (id, product_id, user_id, amount_cents, created_at)
    VALUES (:id, :product_id, :user_id, :amount_cents, :created_at)
""")

_SELECT_COLUMNS = "id, product_id, user_id, amount_cents, created_at"

_GET_BID_BY_ID_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM bids WHERE id = :id
""")

# Every bid sitting at the maximum amount; the domain picks the earliest
_LIST_TOP_BIDS_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM bids
    WHERE product_id = :product_id
      AND amount_cents = (
          SELECT MAX(amount_cents) FROM bids WHERE product_id = :product_id
      )
    ORDER BY created_at ASC, id ASC
""")

_LIST_BY_PRODUCT_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM bids
    WHERE product_id = :product_id
    ORDER BY amount_cents DESC, created_at ASC, id ASC
    LIMIT :limit
""")

_MAX_AMOUNT_SQL = text("""
    SELECT MAX(amount_cents) FROM bids WHERE product_id = :product_id
""")

_DELETE_BID_SQL = text("DELETE FROM bids WHERE id = :id")

_COUNT_BIDS_SQL = text("SELECT COUNT(*) FROM bids")


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_bid(row: Any) -> Bid:
    return Bid(
        id=row.id,
        product_id=row.product_id,
        user_id=str(row.user_id),
        amount_cents=row.amount_cents,
        created_at=row.created_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class BidRepository:
    """Concrete implementation of BidRepositoryProtocol using raw SQL."""

    async def save(self, db: AsyncSession, bid: Bid) -> None:
        await db.execute(
            _INSERT_BID_SQL,
            {
                "id": bid.id,
                "product_id": bid.product_id,
                "user_id": bid.user_id,
                "amount_cents": bid.amount_cents,
                "created_at": bid.created_at,
            },
        )

    async def get_by_id(self, db: AsyncSession, bid_id: str) -> Bid | None:
        result = await db.execute(_GET_BID_BY_ID_SQL, {"id": bid_id})
        row = result.fetchone()
        return _row_to_bid(row) if row else None

    async def list_top_bids(self, db: AsyncSession, product_id: str) -> list[Bid]:
        result = await db.execute(_LIST_TOP_BIDS_SQL, {"product_id": product_id})
        return [_row_to_bid(row) for row in result.fetchall()]

    async def list_by_product(
        self, db: AsyncSession, product_id: str, limit: int
    ) -> list[Bid]:
        result = await db.execute(
            _LIST_BY_PRODUCT_SQL, {"product_id": product_id, "limit": limit}
        )
        return [_row_to_bid(row) for row in result.fetchall()]

    async def max_amount(self, db: AsyncSession, product_id: str) -> int | None:
        result = await db.execute(_MAX_AMOUNT_SQL, {"product_id": product_id})
        value = result.scalar_one_or_none()
        return int(value) if value is not None else None

    async def delete(self, db: AsyncSession, bid_id: str) -> None:
        await db.execute(_DELETE_BID_SQL, {"id": bid_id})

    async def count_all(self, db: AsyncSession) -> int:
        result = await db.execute(_COUNT_BIDS_SQL)
        return int(result.scalar_one())
