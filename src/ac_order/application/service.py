"""OrderApplicationService: fixed-price checkout and order lookup.

Checkout is one transaction: product rows are locked FOR UPDATE in id order
(so two overlapping carts cannot deadlock), stock is decremented with a
guarded UPDATE, then the order and its items are inserted. Any failure
rolls the whole thing back. The payment session is attempted afterwards
and only ever downgrades to a warning.
"""

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from src.ac_catalog.domain.repository import ProductRepositoryProtocol
from src.ac_catalog.infrastructure.persistence import ProductRepository
from src.ac_common.enums import OrderStatus, ProductStatus, ProductType
from src.ac_common.errors import (
    InsufficientStockError,
    InvalidOrderItemsError,
    OrderNotFoundError,
    OrderNotOwnedError,
    ProductNotAvailableError,
    ProductNotFoundError,
)
from src.ac_gateway.user.db_models import UserModel
from src.ac_order.domain.models import Order, OrderItem
from src.ac_order.domain.repository import OrderRepositoryProtocol
from src.ac_order.infrastructure.persistence import OrderRepository
from src.ac_payment.application.sessions import PaymentCustomer, PaymentSessionService

logger = logging.getLogger(__name__)


@dataclass
class CartLine:
    product_id: str
    quantity: int


@dataclass
class CheckoutResult:
    order: Order
    warning: str | None = None


def merge_cart_lines(lines: list[CartLine]) -> dict[str, int]:
    """Validate cart lines and sum quantities per product."""
    if not lines:
        raise InvalidOrderItemsError("Order must contain at least one item")
    merged: dict[str, int] = {}
    for line in lines:
        if line.quantity <= 0:
            raise InvalidOrderItemsError(
                f"Quantity must be positive for product {line.product_id}"
            )
        merged[line.product_id] = merged.get(line.product_id, 0) + line.quantity
    return merged


class OrderApplicationService:
    def __init__(
        self,
        product_repo: ProductRepositoryProtocol | None = None,
        order_repo: OrderRepositoryProtocol | None = None,
        payments: PaymentSessionService | None = None,
    ) -> None:
        self._product_repo: ProductRepositoryProtocol = product_repo or ProductRepository()
        self._order_repo: OrderRepositoryProtocol = order_repo or OrderRepository()
        self._payments = payments or PaymentSessionService(order_repo=self._order_repo)

    async def create_order(
        self,
        db: AsyncSession,
        user: UserModel,
        lines: list[CartLine],
        shipping_address: str | None = None,
        notes: str | None = None,
    ) -> CheckoutResult:
        quantities = merge_cart_lines(lines)
        order_id = str(uuid.uuid4())
        items: list[OrderItem] = []

        try:
            for product_id in sorted(quantities):
                quantity = quantities[product_id]
                product = await self._product_repo.get_for_update(db, product_id)
                if product is None or product.type != ProductType.FIXED_PRICE.value:
                    raise ProductNotFoundError(product_id)
                if product.status != ProductStatus.ACTIVE.value or product.price_cents is None:
                    raise ProductNotAvailableError(product_id)
                available = product.stock_quantity or 0
                if available < quantity:
                    raise InsufficientStockError(product_id, quantity, available)
                if not await self._product_repo.decrement_stock(db, product_id, quantity):
                    raise InsufficientStockError(product_id, quantity, available)

                items.append(
                    OrderItem(
                        id=str(uuid.uuid4()),
                        order_id=order_id,
                        product_id=product_id,
                        quantity=quantity,
                        unit_price_cents=product.price_cents,
                        total_price_cents=product.price_cents * quantity,
                    )
                )

            order = Order(
                id=order_id,
                user_id=str(user.id),
                total_amount_cents=sum(i.total_price_cents for i in items),
                status=OrderStatus.PENDING_PAYMENT.value,
                shipping_address=shipping_address,
                notes=notes,
                items=items,
            )
            await self._order_repo.save(db, order)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Order %s created: user=%s items=%d total=%d",
            order.id,
            order.user_id,
            len(items),
            order.total_amount_cents,
        )

        if not self._payments.gateway.is_configured():
            return CheckoutResult(order=order, warning="Payment gateway is not configured")
        attempt = await self._payments.start_for_order(
            db,
            order,
            PaymentCustomer(name=user.full_name, email=user.email, address=shipping_address),
        )
        return CheckoutResult(order=order, warning=attempt.warning)

    async def get_order(self, db: AsyncSession, order_id: str, user_id: str) -> Order:
        order = await self._order_repo.get_by_id(db, order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        if order.user_id != user_id:
            raise OrderNotOwnedError(order_id)
        return order
