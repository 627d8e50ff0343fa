"""Pydantic schemas for ac_order API requests/responses."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.ac_common.cents import cents_to_display
from src.ac_order.domain.models import Order, OrderItem


class OrderItemRequest(BaseModel):
    product_id: str = Field(min_length=1)
    quantity: int = Field(gt=0)


class CreateOrderRequest(BaseModel):
    items: list[OrderItemRequest]
    shipping_address: str | None = None
    notes: str | None = Field(None, max_length=1000)


class OrderItemResponse(BaseModel):
    id: str
    product_id: str
    quantity: int
    unit_price_cents: int
    total_price_cents: int

    @classmethod
    def from_domain(cls, item: OrderItem) -> "OrderItemResponse":
        return cls(
            id=item.id,
            product_id=item.product_id,
            quantity=item.quantity,
            unit_price_cents=item.unit_price_cents,
            total_price_cents=item.total_price_cents,
        )


class OrderResponse(BaseModel):
    id: str
    user_id: str
    status: str
    total_amount_cents: int
    total_amount_display: str
    invoice_id: str | None = None
    payment_id: str | None = None
    payment_url: str | None = None
    shipping_address: str | None = None
    notes: str | None = None
    items: list[OrderItemResponse]
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            user_id=order.user_id,
            status=order.status,
            total_amount_cents=order.total_amount_cents,
            total_amount_display=cents_to_display(order.total_amount_cents),
            invoice_id=order.invoice_id,
            payment_id=order.payment_id,
            payment_url=order.payment_url,
            shipping_address=order.shipping_address,
            notes=order.notes,
            items=[OrderItemResponse.from_domain(i) for i in order.items],
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
