# src/ac_order/infrastructure/persistence.py
"""OrderRepository: raw SQL persistence implementation.

An order and its items are always written by `save` in the caller's
transaction, so they commit (or roll back) together.
"""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ac_order.domain.models import Order, OrderItem

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_INSERT_ORDER_SQL = text("""
    INSERT INTO orders (id, user_id, total_amount_cents, status,
        shipping_address, notes)
    VALUES (:id, :user_id, :total_amount_cents, :status,
        :shipping_address, :notes)
""")

_INSERT_ORDER_ITEM_SQL = text("""
    INSERT INTO order_items (id, order_id, product_id, quantity,
        unit_price_cents, total_price_cents)
    VALUES (:id, :order_id, :product_id, :quantity,
        :unit_price_cents, :total_price_cents)
""")

_GET_ORDER_BY_ID_SQL = text("""
    SELECT id, user_id, total_amount_cents, status,
           invoice_id, payment_id, payment_url,
           shipping_address, notes, created_at, updated_at
    FROM orders WHERE id = :id
""")

_LIST_ORDER_ITEMS_SQL = text("""
    SELECT id, order_id, product_id, quantity, unit_price_cents, total_price_cents
    FROM order_items WHERE order_id = :order_id
    ORDER BY id
""")

_UPDATE_STATUS_SQL = text("""
    UPDATE orders
    SET status = :status, updated_at = NOW()
    WHERE id = :id
""")

_ATTACH_PAYMENT_SQL = text("""
    UPDATE orders
    SET invoice_id = :invoice_id, payment_id = :payment_id,
        payment_url = :payment_url, updated_at = NOW()
    WHERE id = :id
""")


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_item(row: Any) -> OrderItem:
    return OrderItem(
        id=row.id,
        order_id=row.order_id,
        product_id=row.product_id,
        quantity=row.quantity,
        unit_price_cents=row.unit_price_cents,
        total_price_cents=row.total_price_cents,
    )


def _row_to_order(row: Any, items: list[OrderItem]) -> Order:
    return Order(
        id=row.id,
        user_id=str(row.user_id),
        total_amount_cents=row.total_amount_cents,
        status=row.status,
        invoice_id=row.invoice_id,
        payment_id=row.payment_id,
        payment_url=row.payment_url,
        shipping_address=row.shipping_address,
        notes=row.notes,
        items=items,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class OrderRepository:
    """Concrete implementation of OrderRepositoryProtocol using raw SQL."""

    async def save(self, db: AsyncSession, order: Order) -> None:
        await db.execute(
            _INSERT_ORDER_SQL,
            {
                "id": order.id,
                "user_id": order.user_id,
                "total_amount_cents": order.total_amount_cents,
                "status": order.status,
                "shipping_address": order.shipping_address,
                "notes": order.notes,
            },
        )
        for item in order.items:
            await db.execute(
                _INSERT_ORDER_ITEM_SQL,
                {
                    "id": item.id,
                    "order_id": order.id,
                    "product_id": item.product_id,
                    "quantity": item.quantity,
                    "unit_price_cents": item.unit_price_cents,
                    "total_price_cents": item.total_price_cents,
                },
            )

    async def get_by_id(self, db: AsyncSession, order_id: str) -> Order | None:
        result = await db.execute(_GET_ORDER_BY_ID_SQL, {"id": order_id})
        row = result.fetchone()
        if row is None:
            return None
        items_result = await db.execute(_LIST_ORDER_ITEMS_SQL, {"order_id": order_id})
        items = [_row_to_item(r) for r in items_result.fetchall()]
        return _row_to_order(row, items)

    async def update_status(self, db: AsyncSession, order_id: str, status: str) -> bool:
        result = await db.execute(_UPDATE_STATUS_SQL, {"id": order_id, "status": status})
        return bool(result.rowcount)  # type: ignore[attr-defined]

    async def attach_payment(
        self,
        db: AsyncSession,
        order_id: str,
        invoice_id: str,
        payment_id: str,
        payment_url: str,
    ) -> None:
        await db.execute(
            _ATTACH_PAYMENT_SQL,
            {
                "id": order_id,
                "invoice_id": invoice_id,
                "payment_id": payment_id,
                "payment_url": payment_url,
            },
        )
