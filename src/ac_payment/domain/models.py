"""Payment domain models: pure dataclasses."""

from dataclasses import dataclass


@dataclass
class PaymentRequest:
    order_id: str
    amount_cents: int
    customer_name: str
    customer_email: str
    customer_address: str | None = None
    customer_phone: str | None = None
    language: str = "EN"


@dataclass
class PaymentSession:
    """Normalised InitiatePayment response."""

    invoice_id: str
    payment_id: str
    payment_url: str
    is_direct_payment: bool = False
    payment_method: str | None = None


@dataclass
class PaymentCallback:
    """Normalised webhook payload, already mapped to the order vocabulary."""

    order_id: str
    status: str          # OrderStatus value
    invoice_id: str | None
    gateway_status: str | None
