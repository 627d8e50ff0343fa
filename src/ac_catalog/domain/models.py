"""Domain models for ac_catalog: pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Product:
    id: str
    name: str
    description: str | None
    category: str | None
    type: str                               # FIXED_PRICE / AUCTION (immutable)
    status: str
    # Fixed-price fields
    price_cents: int | None
    stock_quantity: int | None
    # Auction fields
    starting_price_cents: int | None
    current_highest_bid_cents: int | None   # starts equal to starting price
    auction_end_time: datetime | None       # immutable once set
    created_at: datetime
    updated_at: datetime

    @property
    def is_auction(self) -> bool:
        return self.type == "AUCTION"

    @property
    def bid_threshold_cents(self) -> int:
        """Amount a new bid must strictly exceed."""
        return max(self.current_highest_bid_cents or 0, self.starting_price_cents or 0)
