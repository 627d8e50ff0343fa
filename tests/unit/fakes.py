"""In-memory repositories for service-level unit tests.

They mirror the guarded SQL of the real repositories (conditional highest-bid
update, ACTIVE-only close, stock guard) so concurrency and ordering rules can
be exercised without PostgreSQL.
"""

import asyncio
import copy
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

from src.ac_auction.domain.models import Bid
from src.ac_catalog.domain.models import Product


def make_product(**kwargs) -> Product:
    now = datetime.now(UTC)
    defaults = dict(
        id="prod-1", name="Vintage Watch", description=None, category="watches",
        type="AUCTION", status="ACTIVE", price_cents=None, stock_quantity=None,
        starting_price_cents=10000, current_highest_bid_cents=10000,
        auction_end_time=now + timedelta(hours=1), created_at=now, updated_at=now,
    )
    defaults.update(kwargs)
    return Product(**defaults)


def make_fixed_product(**kwargs) -> Product:
    defaults = dict(
        type="FIXED_PRICE", price_cents=2500, stock_quantity=10,
        starting_price_cents=None, current_highest_bid_cents=None, auction_end_time=None,
    )
    defaults.update(kwargs)
    return make_product(**defaults)


def make_user(user_id: str = "user-a", **kwargs) -> SimpleNamespace:
    defaults = dict(
        id=user_id, email=f"{user_id}@example.com", first_name="Test", last_name=user_id,
        is_active=True,
    )
    defaults.update(kwargs)
    user = SimpleNamespace(**defaults)
    user.full_name = f"{user.first_name} {user.last_name}"
    return user


class FakeProductRepository:
    def __init__(self, *products: Product) -> None:
        self.products = {p.id: p for p in products}

    async def get_by_id(self, db, product_id):
        p = self.products.get(product_id)
        return copy.copy(p) if p else None

    async def get_for_update(self, db, product_id):
        await asyncio.sleep(0)
        p = self.products.get(product_id)
        return copy.copy(p) if p else None

    async def list_ended_auctions(self, db, now):
        return [
            copy.copy(p)
            for p in self.products.values()
            if p.type == "AUCTION" and p.status == "ACTIVE"
            and p.auction_end_time is not None and p.auction_end_time <= now
        ]

    async def raise_highest_bid(self, db, product_id, amount_cents):
        await asyncio.sleep(0)
        p = self.products[product_id]
        current = p.current_highest_bid_cents or p.starting_price_cents
        if p.status != "ACTIVE" or current >= amount_cents or p.starting_price_cents >= amount_cents:
            return False
        p.current_highest_bid_cents = amount_cents
        return True

    async def set_highest_bid(self, db, product_id, amount_cents):
        self.products[product_id].current_highest_bid_cents = amount_cents

    async def close_auction(self, db, product_id, new_status):
        p = self.products[product_id]
        if p.type != "AUCTION" or p.status != "ACTIVE":
            return False
        p.status = new_status
        return True

    async def decrement_stock(self, db, product_id, quantity):
        p = self.products[product_id]
        if (p.stock_quantity or 0) < quantity:
            return False
        p.stock_quantity -= quantity
        return True

    async def count_auctions_by_status(self, db):
        counts: dict[str, int] = {}
        for p in self.products.values():
            if p.type == "AUCTION":
                counts[p.status] = counts.get(p.status, 0) + 1
        return counts


class FakeBidRepository:
    def __init__(self, *bids: Bid) -> None:
        self.bids = {b.id: b for b in bids}

    async def save(self, db, bid):
        self.bids[bid.id] = bid

    async def get_by_id(self, db, bid_id):
        return self.bids.get(bid_id)

    async def list_top_bids(self, db, product_id):
        mine = [b for b in self.bids.values() if b.product_id == product_id]
        if not mine:
            return []
        top = max(b.amount_cents for b in mine)
        return sorted(
            (b for b in mine if b.amount_cents == top), key=lambda b: (b.created_at, b.id)
        )

    async def list_by_product(self, db, product_id, limit):
        mine = [b for b in self.bids.values() if b.product_id == product_id]
        mine.sort(key=lambda b: (-b.amount_cents, b.created_at, b.id))
        return mine[:limit]

    async def max_amount(self, db, product_id):
        amounts = [b.amount_cents for b in self.bids.values() if b.product_id == product_id]
        return max(amounts) if amounts else None

    async def delete(self, db, bid_id):
        self.bids.pop(bid_id, None)

    async def count_all(self, db):
        return len(self.bids)


class FakeOrderRepository:
    def __init__(self) -> None:
        self.orders = {}
        self.attached = []

    async def save(self, db, order):
        self.orders[order.id] = order

    async def get_by_id(self, db, order_id):
        return self.orders.get(order_id)

    async def update_status(self, db, order_id, status):
        if order_id not in self.orders:
            return False
        self.orders[order_id].status = status
        return True

    async def attach_payment(self, db, order_id, invoice_id, payment_id, payment_url):
        self.attached.append((order_id, invoice_id, payment_id, payment_url))


def make_bid(bid_id: str, user_id: str, amount: int, offset_s: int = 0,
             product_id: str = "prod-1") -> Bid:
    t0 = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
    return Bid(
        id=bid_id, product_id=product_id, user_id=user_id, amount_cents=amount,
        created_at=t0 + timedelta(seconds=offset_s),
    )
