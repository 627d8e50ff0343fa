"""Domain models for ac_auction: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Bid:
    id: str
    product_id: str
    user_id: str
    amount_cents: int
    created_at: datetime   # immutable; earliest wins a tie at resolution


@dataclass
class PlacedBid:
    """Result of an accepted bid plus who (if anyone) it displaced."""

    bid: Bid
    previous_leader_id: str | None


@dataclass
class AuctionStats:
    active_auctions: int
    concluded_auctions: int
    expired_auctions: int
    total_bids: int


@dataclass
class SweepResult:
    """Outcome of one resolution sweep, by product id."""

    concluded: list[str] = field(default_factory=list)
    expired: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
