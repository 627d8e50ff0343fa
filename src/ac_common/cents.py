"""Integer money utilities.

All prices, bids and order totals are stored and compared as int cents.
Decimal amounts only appear at the payment-gateway wire boundary.
"""

from decimal import Decimal


def validate_amount(amount_cents: int) -> None:
    """Validate that a monetary amount is a positive number of cents."""
    if amount_cents <= 0:
        raise ValueError(f"Amount must be positive, got {amount_cents} cents")


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '$65.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"


def cents_to_decimal(cents: int) -> Decimal:
    """15050 -> Decimal('150.50'). Exact, no float rounding."""
    return (Decimal(cents) / 100).quantize(Decimal("0.01"))


def cents_to_amount_str(cents: int) -> str:
    """Plain decimal string used in notification payloads: 15000 -> '150.00'."""
    return str(cents_to_decimal(cents))
