"""Gateway callback parsing: pure functions, no I/O.

Payload fields (MyFatoorah webhook):
  InvoiceId                             invoice identifier (required by the webhook)
  CustomerReference | UserDefinedField  our order id, echoed back from session creation
  InvoiceStatus                         "Paid" | "Failed" | "Pending" | ...

Status mapping:
  Paid -> PAID, Failed -> FAILED, Pending -> PENDING_PAYMENT, anything else -> FAILED
"""

from typing import Any

from src.ac_common.enums import GatewayInvoiceStatus, OrderStatus
from src.ac_common.errors import InvalidCallbackPayloadError
from src.ac_payment.domain.models import PaymentCallback

_STATUS_MAP: dict[str, OrderStatus] = {
    GatewayInvoiceStatus.PAID.value: OrderStatus.PAID,
    GatewayInvoiceStatus.FAILED.value: OrderStatus.FAILED,
    GatewayInvoiceStatus.PENDING.value: OrderStatus.PENDING_PAYMENT,
}


def map_gateway_status(gateway_status: str | None) -> OrderStatus:
    if gateway_status is None:
        return OrderStatus.FAILED
    return _STATUS_MAP.get(gateway_status, OrderStatus.FAILED)


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def extract_order_reference(payload: dict[str, Any]) -> str | None:
    return _as_text(payload.get("CustomerReference")) or _as_text(
        payload.get("UserDefinedField")
    )


def parse_payment_callback(payload: dict[str, Any]) -> PaymentCallback:
    """Map a webhook payload to {order_id, status}.

    Raises:
        InvalidCallbackPayloadError: no order reference in the payload.
    """
    order_id = extract_order_reference(payload)
    if order_id is None:
        raise InvalidCallbackPayloadError("Order ID not found in callback data")
    gateway_status = _as_text(payload.get("InvoiceStatus"))
    return PaymentCallback(
        order_id=order_id,
        status=map_gateway_status(gateway_status).value,
        invoice_id=_as_text(payload.get("InvoiceId")),
        gateway_status=gateway_status,
    )
