"""AuctionResolutionService: close every ACTIVE auction past its end time.

Each candidate is resolved in its own session and transaction:

    SELECT ... FOR UPDATE  -> skip unless still ACTIVE
    no bids                -> EXPIRED
    winning bid            -> Order(PENDING_PAYMENT) + OrderItem, CONCLUDED
    COMMIT

Side effects (payment session, "auction won" notification) run only after
the commit and can never undo it. One failing auction is logged and the
sweep carries on with the rest.
"""

import logging
import uuid
from enum import Enum

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.ac_auction.domain.models import Bid, SweepResult
from src.ac_auction.domain.repository import BidRepositoryProtocol
from src.ac_auction.domain.winner import select_winning_bid
from src.ac_auction.infrastructure.persistence import BidRepository
from src.ac_catalog.domain.models import Product
from src.ac_catalog.domain.repository import ProductRepositoryProtocol
from src.ac_catalog.infrastructure.persistence import ProductRepository
from src.ac_common.database import async_session_factory
from src.ac_common.datetime_utils import utc_now
from src.ac_common.enums import OrderStatus, ProductStatus
from src.ac_gateway.user.persistence import UserRepository
from src.ac_notification.application.service import NotificationService
from src.ac_order.domain.models import Order, OrderItem
from src.ac_order.domain.repository import OrderRepositoryProtocol
from src.ac_order.infrastructure.persistence import OrderRepository
from src.ac_payment.application.sessions import PaymentCustomer, PaymentSessionService

logger = logging.getLogger(__name__)

# Auction orders carry no shipping address until the winner supplies one
WINNER_ADDRESS_PLACEHOLDER = "Auction winner, address to be provided"


class ResolutionOutcome(str, Enum):
    EXPIRED = "expired"
    CONCLUDED = "concluded"
    SKIPPED = "skipped"


def build_winner_order(product: Product, winning_bid: Bid) -> Order:
    order_id = str(uuid.uuid4())
    item = OrderItem(
        id=str(uuid.uuid4()),
        order_id=order_id,
        product_id=product.id,
        quantity=1,
        unit_price_cents=winning_bid.amount_cents,
        total_price_cents=winning_bid.amount_cents,
    )
    return Order(
        id=order_id,
        user_id=winning_bid.user_id,
        total_amount_cents=winning_bid.amount_cents,
        status=OrderStatus.PENDING_PAYMENT.value,
        notes=f"Auction win for product: {product.name} ({product.id})",
        items=[item],
    )


class AuctionResolutionService:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        product_repo: ProductRepositoryProtocol | None = None,
        bid_repo: BidRepositoryProtocol | None = None,
        order_repo: OrderRepositoryProtocol | None = None,
        user_repo: UserRepository | None = None,
        payments: PaymentSessionService | None = None,
        notifications: NotificationService | None = None,
    ) -> None:
        self._session_factory = session_factory or async_session_factory
        self._product_repo: ProductRepositoryProtocol = product_repo or ProductRepository()
        self._bid_repo: BidRepositoryProtocol = bid_repo or BidRepository()
        self._order_repo: OrderRepositoryProtocol = order_repo or OrderRepository()
        self._user_repo = user_repo or UserRepository()
        self._payments = payments or PaymentSessionService(order_repo=self._order_repo)
        self._notifications = notifications or NotificationService()

    async def process_ended_auctions(self) -> SweepResult:
        result = SweepResult()
        async with self._session_factory() as db:
            candidates = await self._product_repo.list_ended_auctions(db, utc_now())

        if not candidates:
            logger.debug("No ended auctions to process")
            return result
        logger.info("Processing %d ended auction(s)", len(candidates))

        for product in candidates:
            try:
                outcome = await self.resolve_auction(product.id)
            except Exception:
                logger.exception("Failed to resolve auction %s", product.id)
                result.failed.append(product.id)
                continue
            if outcome is ResolutionOutcome.CONCLUDED:
                result.concluded.append(product.id)
            elif outcome is ResolutionOutcome.EXPIRED:
                result.expired.append(product.id)
            else:
                result.skipped.append(product.id)

        logger.info(
            "Auction sweep done: concluded=%d expired=%d skipped=%d failed=%d",
            len(result.concluded),
            len(result.expired),
            len(result.skipped),
            len(result.failed),
        )
        return result

    async def resolve_auction(self, product_id: str) -> ResolutionOutcome:
        async with self._session_factory() as db:
            try:
                product = await self._product_repo.get_for_update(db, product_id)
                if (
                    product is None
                    or not product.is_auction
                    or product.status != ProductStatus.ACTIVE.value
                ):
                    await db.rollback()
                    return ResolutionOutcome.SKIPPED

                winning_bid = select_winning_bid(
                    await self._bid_repo.list_top_bids(db, product_id)
                )
                if winning_bid is None:
                    await self._product_repo.close_auction(
                        db, product_id, ProductStatus.EXPIRED.value
                    )
                    await db.commit()
                    logger.info("Auction %s expired with no bids", product_id)
                    return ResolutionOutcome.EXPIRED

                order = build_winner_order(product, winning_bid)
                await self._order_repo.save(db, order)
                await self._product_repo.close_auction(
                    db, product_id, ProductStatus.CONCLUDED.value
                )
                await db.commit()
            except Exception:
                await db.rollback()
                raise

            logger.info(
                "Auction %s concluded: winner=%s amount=%d order=%s",
                product_id,
                winning_bid.user_id,
                winning_bid.amount_cents,
                order.id,
            )
            await self._start_payment(db, order)

        await self._notifications.send_auction_won(
            winning_bid.user_id,
            product.id,
            product.name,
            order.id,
            winning_bid.amount_cents,
        )
        return ResolutionOutcome.CONCLUDED

    async def _start_payment(self, db: AsyncSession, order: Order) -> None:
        if not self._payments.gateway.is_configured():
            logger.info("Payment gateway not configured, order %s left without session", order.id)
            return
        try:
            winner = await self._user_repo.get_by_id(db, order.user_id)
            if winner is None:
                logger.warning("Winner %s of order %s not found", order.user_id, order.id)
                return
            attempt = await self._payments.start_for_order(
                db,
                order,
                PaymentCustomer(
                    name=winner.full_name,
                    email=winner.email,
                    address=order.shipping_address or WINNER_ADDRESS_PLACEHOLDER,
                ),
            )
        except Exception:
            logger.exception("Payment session for order %s failed", order.id)
            return
        if attempt.warning:
            logger.warning("Order %s: %s", order.id, attempt.warning)
