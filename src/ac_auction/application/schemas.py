"""Pydantic schemas for ac_auction API requests/responses."""

from datetime import datetime

from pydantic import BaseModel, field_validator

from src.ac_auction.domain.models import AuctionStats, Bid
from src.ac_common.cents import cents_to_display, validate_amount


class PlaceBidRequest(BaseModel):
    amount_cents: int

    @field_validator("amount_cents")
    @classmethod
    def positive_amount(cls, v: int) -> int:
        validate_amount(v)
        return v


class BidResponse(BaseModel):
    id: str
    product_id: str
    user_id: str
    amount_cents: int
    amount_display: str
    created_at: datetime

    @classmethod
    def from_domain(cls, bid: Bid) -> "BidResponse":
        return cls(
            id=bid.id,
            product_id=bid.product_id,
            user_id=bid.user_id,
            amount_cents=bid.amount_cents,
            amount_display=cents_to_display(bid.amount_cents),
            created_at=bid.created_at,
        )


class BidListResponse(BaseModel):
    product_id: str
    items: list[BidResponse]


class CancelBidResponse(BaseModel):
    bid_id: str
    product_id: str
    current_highest_bid_cents: int


class SchedulerStatus(BaseModel):
    is_running: bool
    interval_minutes: float | None
    last_run_at: datetime | None = None
    last_error: str | None = None


class AuctionStatsResponse(BaseModel):
    active_auctions: int
    concluded_auctions: int
    expired_auctions: int
    total_bids: int
    scheduler: SchedulerStatus | None = None

    @classmethod
    def from_domain(
        cls, stats: AuctionStats, scheduler: SchedulerStatus | None = None
    ) -> "AuctionStatsResponse":
        return cls(
            active_auctions=stats.active_auctions,
            concluded_auctions=stats.concluded_auctions,
            expired_auctions=stats.expired_auctions,
            total_bids=stats.total_bids,
            scheduler=scheduler,
        )
