"""Unit tests for ProductRepository and BidRepository using MagicMock AsyncSession."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.ac_auction.domain.models import Bid
from src.ac_auction.infrastructure.persistence import BidRepository
from src.ac_catalog.infrastructure.persistence import ProductRepository


def _make_product_row(**kwargs):
    row = MagicMock()
    row.id = kwargs.get("id", "prod-1")
    row.name = kwargs.get("name", "Vintage Watch")
    row.description = None
    row.category = "watches"
    row.type = kwargs.get("type", "AUCTION")
    row.status = kwargs.get("status", "ACTIVE")
    row.price_cents = None
    row.stock_quantity = None
    row.starting_price_cents = 10000
    row.current_highest_bid_cents = kwargs.get("current_highest_bid_cents", 12000)
    row.auction_end_time = datetime.now(UTC)
    row.created_at = datetime.now(UTC)
    row.updated_at = datetime.now(UTC)
    return row


def _make_bid_row(**kwargs):
    row = MagicMock()
    row.id = kwargs.get("id", "b1")
    row.product_id = "prod-1"
    row.user_id = kwargs.get("user_id", "5f1c0b0e-0000-4000-8000-000000000001")
    row.amount_cents = kwargs.get("amount_cents", 12000)
    row.created_at = datetime.now(UTC)
    return row


@pytest.fixture
def db():
    return MagicMock()


class TestProductRepository:
    async def test_get_for_update_locks_row(self, db):
        result = MagicMock()
        result.fetchone.return_value = _make_product_row()
        db.execute = AsyncMock(return_value=result)

        product = await ProductRepository().get_for_update(db, "prod-1")

        assert product is not None
        assert product.current_highest_bid_cents == 12000
        sql = str(db.execute.call_args.args[0])
        assert "FOR UPDATE" in sql

    async def test_get_by_id_not_found(self, db):
        result = MagicMock()
        result.fetchone.return_value = None
        db.execute = AsyncMock(return_value=result)

        assert await ProductRepository().get_by_id(db, "missing") is None

    async def test_raise_highest_bid_reports_guard(self, db):
        db.execute = AsyncMock(return_value=MagicMock(rowcount=0))
        assert await ProductRepository().raise_highest_bid(db, "prod-1", 12000) is False

        db.execute = AsyncMock(return_value=MagicMock(rowcount=1))
        assert await ProductRepository().raise_highest_bid(db, "prod-1", 13000) is True
        sql = str(db.execute.call_args.args[0])
        assert "status = 'ACTIVE'" in sql
        assert db.execute.call_args.args[1] == {"product_id": "prod-1", "amount": 13000}

    async def test_close_auction_only_from_active(self, db):
        db.execute = AsyncMock(return_value=MagicMock(rowcount=1))
        assert await ProductRepository().close_auction(db, "prod-1", "EXPIRED") is True
        assert "status = 'ACTIVE'" in str(db.execute.call_args.args[0])

    async def test_decrement_stock_guard(self, db):
        db.execute = AsyncMock(return_value=MagicMock(rowcount=0))
        assert await ProductRepository().decrement_stock(db, "p1", 5) is False
        assert "stock_quantity >= :quantity" in str(db.execute.call_args.args[0])

    async def test_count_auctions_by_status(self, db):
        rows = [MagicMock(status="ACTIVE", total=3), MagicMock(status="EXPIRED", total=1)]
        result = MagicMock()
        result.fetchall.return_value = rows
        db.execute = AsyncMock(return_value=result)

        counts = await ProductRepository().count_auctions_by_status(db)

        assert counts == {"ACTIVE": 3, "EXPIRED": 1}


class TestBidRepository:
    async def test_save_passes_all_fields(self, db):
        db.execute = AsyncMock()
        bid = Bid(id="b1", product_id="prod-1", user_id="u1", amount_cents=12000,
                  created_at=datetime.now(UTC))

        await BidRepository().save(db, bid)

        params = db.execute.call_args.args[1]
        assert params["amount_cents"] == 12000
        assert params["created_at"] is bid.created_at

    async def test_list_top_bids_maps_uuid_user(self, db):
        result = MagicMock()
        result.fetchall.return_value = [_make_bid_row()]
        db.execute = AsyncMock(return_value=result)

        bids = await BidRepository().list_top_bids(db, "prod-1")

        assert len(bids) == 1
        assert isinstance(bids[0].user_id, str)
        assert "MAX(amount_cents)" in str(db.execute.call_args.args[0])

    async def test_max_amount_none_without_bids(self, db):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        db.execute = AsyncMock(return_value=result)

        assert await BidRepository().max_amount(db, "prod-1") is None

    async def test_count_all(self, db):
        result = MagicMock()
        result.scalar_one.return_value = 42
        db.execute = AsyncMock(return_value=result)

        assert await BidRepository().count_all(db) == 42
