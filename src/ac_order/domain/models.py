"""Order domain models: pure dataclasses, no SQLAlchemy dependency."""
from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class OrderItem:
    """Immutable price x quantity snapshot taken when the order is created."""

    id: str
    order_id: str
    product_id: str
    quantity: int
    unit_price_cents: int
    total_price_cents: int


@dataclass
class Order:
    id: str
    user_id: str
    total_amount_cents: int
    status: str = "PENDING_PAYMENT"
    # Set once a payment session exists
    invoice_id: str | None = None
    payment_id: str | None = None
    payment_url: str | None = None
    shipping_address: str | None = None
    notes: str | None = None
    items: list[OrderItem] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_awaiting_payment(self) -> bool:
        return self.status == "PENDING_PAYMENT"
