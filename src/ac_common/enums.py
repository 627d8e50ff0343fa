"""Global enums: must match DB CHECK constraints exactly.

See alembic/versions/003_create_products.py and 005_create_orders.py.
"""

from enum import Enum


class ProductType(str, Enum):
    FIXED_PRICE = "FIXED_PRICE"
    AUCTION = "AUCTION"


class ProductStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SOLD = "SOLD"
    # Terminal auction outcomes: no bids / winner order created
    EXPIRED = "EXPIRED"
    CONCLUDED = "CONCLUDED"


class OrderStatus(str, Enum):
    PENDING_PAYMENT = "PENDING_PAYMENT"
    PAID = "PAID"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"


class GatewayInvoiceStatus(str, Enum):
    """Invoice status vocabulary sent by the payment gateway on callback."""
    PAID = "Paid"
    FAILED = "Failed"
    PENDING = "Pending"


class NotificationType(str, Enum):
    OUTBID = "outbid"
    AUCTION_WON = "auction_won"
    PAYMENT_STATUS_UPDATE = "payment_status_update"
