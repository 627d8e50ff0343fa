"""BidApplicationService: bid acceptance, cancellation, listing and stats.

Concurrency for one product:
  1. per-product asyncio.Lock       serialises bids inside this process
  2. SELECT ... FOR UPDATE          serialises across processes
  3. conditional UPDATE (rowcount)  the ACTIVE + amount guard is authoritative,
                                    so a bid racing the resolution sweep loses

Transaction ownership: this service commits on success and rolls back on any
failure. The outbid notification is sent only after the commit.
"""

import asyncio
import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from src.ac_auction.domain.models import AuctionStats, Bid, PlacedBid
from src.ac_auction.domain.repository import BidRepositoryProtocol
from src.ac_auction.domain.winner import select_winning_bid
from src.ac_auction.infrastructure.persistence import BidRepository
from src.ac_catalog.domain.models import Product
from src.ac_catalog.domain.repository import ProductRepositoryProtocol
from src.ac_catalog.infrastructure.persistence import ProductRepository
from src.ac_common.datetime_utils import as_utc, utc_now
from src.ac_common.enums import ProductStatus
from src.ac_common.errors import (
    AuctionEndedError,
    AuctionNotActiveError,
    BidNotFoundError,
    BidNotOwnedError,
    BidTooLowError,
    NotAnAuctionError,
    ProductNotFoundError,
    UserNotFoundError,
)
from src.ac_gateway.user.persistence import UserRepository
from src.ac_notification.application.service import NotificationService

logger = logging.getLogger(__name__)


def _check_open_for_bidding(product: Product) -> None:
    if product.status != ProductStatus.ACTIVE.value:
        raise AuctionNotActiveError(product.id)
    if product.auction_end_time is not None and as_utc(product.auction_end_time) <= utc_now():
        raise AuctionEndedError(product.id)


@dataclass
class _LockEntry:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    holders: int = 0


class ProductLocks:
    """Per-product asyncio.Lock, dropped once no task holds or awaits it."""

    def __init__(self) -> None:
        self._entries: dict[str, _LockEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    @asynccontextmanager
    async def hold(self, product_id: str) -> AsyncIterator[None]:
        entry = self._entries.setdefault(product_id, _LockEntry())
        entry.holders += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.holders -= 1
            if entry.holders == 0:
                del self._entries[product_id]


class BidApplicationService:
    def __init__(
        self,
        product_repo: ProductRepositoryProtocol | None = None,
        bid_repo: BidRepositoryProtocol | None = None,
        user_repo: UserRepository | None = None,
        notifications: NotificationService | None = None,
    ) -> None:
        self._product_repo: ProductRepositoryProtocol = product_repo or ProductRepository()
        self._bid_repo: BidRepositoryProtocol = bid_repo or BidRepository()
        self._user_repo = user_repo or UserRepository()
        self._notifications = notifications or NotificationService()
        self._product_locks = ProductLocks()

    async def place_bid(
        self, db: AsyncSession, product_id: str, user_id: str, amount_cents: int
    ) -> PlacedBid:
        """Accept a bid strictly above max(current highest bid, starting price).

        Precondition order: product exists, is an auction, is ACTIVE, has not
        ended, bidder exists, amount beats the threshold.
        """
        async with self._product_locks.hold(product_id):
            try:
                product = await self._product_repo.get_for_update(db, product_id)
                if product is None:
                    raise ProductNotFoundError(product_id)
                if not product.is_auction:
                    raise NotAnAuctionError(product_id)
                _check_open_for_bidding(product)

                if await self._user_repo.get_by_id(db, user_id) is None:
                    raise UserNotFoundError(user_id)

                threshold = product.bid_threshold_cents
                if amount_cents <= threshold:
                    raise BidTooLowError(amount_cents, threshold)

                previous = select_winning_bid(
                    await self._bid_repo.list_top_bids(db, product_id)
                )

                if not await self._product_repo.raise_highest_bid(
                    db, product_id, amount_cents
                ):
                    # Guard lost: report the state that beat us, not the one we read
                    current = await self._product_repo.get_by_id(db, product_id)
                    if current is None:
                        raise ProductNotFoundError(product_id)
                    _check_open_for_bidding(current)
                    raise BidTooLowError(amount_cents, current.bid_threshold_cents)

                bid = Bid(
                    id=str(uuid.uuid4()),
                    product_id=product_id,
                    user_id=user_id,
                    amount_cents=amount_cents,
                    created_at=utc_now(),
                )
                await self._bid_repo.save(db, bid)
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        logger.info(
            "Bid accepted: product=%s user=%s amount=%d", product_id, user_id, amount_cents
        )

        previous_leader = None
        if previous is not None and previous.user_id != user_id:
            previous_leader = previous.user_id
            await self._notifications.send_outbid(
                previous_leader, product.id, product.name, amount_cents
            )
        return PlacedBid(bid=bid, previous_leader_id=previous_leader)

    async def cancel_bid(self, db: AsyncSession, bid_id: str, user_id: str) -> tuple[Bid, int]:
        """Withdraw an own bid while the auction is open.

        Returns the deleted bid and the recomputed highest bid for its product.
        """
        bid = await self._bid_repo.get_by_id(db, bid_id)
        if bid is None:
            raise BidNotFoundError(bid_id)
        if bid.user_id != user_id:
            raise BidNotOwnedError(bid_id)

        async with self._product_locks.hold(bid.product_id):
            try:
                product = await self._product_repo.get_for_update(db, bid.product_id)
                if product is None:
                    raise ProductNotFoundError(bid.product_id)
                _check_open_for_bidding(product)

                await self._bid_repo.delete(db, bid_id)
                remaining_max = await self._bid_repo.max_amount(db, bid.product_id)
                new_highest = (
                    remaining_max
                    if remaining_max is not None
                    else (product.starting_price_cents or 0)
                )
                await self._product_repo.set_highest_bid(db, bid.product_id, new_highest)
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        logger.info(
            "Bid cancelled: bid=%s product=%s highest now %d",
            bid_id,
            bid.product_id,
            new_highest,
        )
        return bid, new_highest

    async def list_bids(self, db: AsyncSession, product_id: str, limit: int = 50) -> list[Bid]:
        product = await self._product_repo.get_by_id(db, product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        if not product.is_auction:
            raise NotAnAuctionError(product_id)
        return await self._bid_repo.list_by_product(db, product_id, limit)

    async def get_auction_stats(self, db: AsyncSession) -> AuctionStats:
        by_status = await self._product_repo.count_auctions_by_status(db)
        total_bids = await self._bid_repo.count_all(db)
        return AuctionStats(
            active_auctions=by_status.get(ProductStatus.ACTIVE.value, 0),
            concluded_auctions=by_status.get(ProductStatus.CONCLUDED.value, 0),
            expired_auctions=by_status.get(ProductStatus.EXPIRED.value, 0),
            total_bids=total_bids,
        )
