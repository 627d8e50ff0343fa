"""ac_auction REST endpoints.

POST   /auctions/{product_id}/bids   place a bid (rate limited per user)
GET    /auctions/{product_id}/bids   bids, highest first
DELETE /bids/{bid_id}                withdraw own bid while the auction is open
GET    /auctions/stats               auction counts + scheduler status
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.ac_auction.application.bid_service import BidApplicationService
from src.ac_auction.application.schemas import (
    AuctionStatsResponse,
    BidListResponse,
    BidResponse,
    CancelBidResponse,
    PlaceBidRequest,
)
from src.ac_common.database import get_db_session
from src.ac_common.response import ApiResponse, success_response
from src.ac_gateway.auth.dependencies import get_current_user
from src.ac_gateway.middleware.rate_limit import limit_bid_rate
from src.ac_gateway.middleware.request_log import get_request_id
from src.ac_gateway.user.db_models import UserModel

router = APIRouter(tags=["auctions"])

_service = BidApplicationService()


def get_bid_service() -> BidApplicationService:
    return _service


@router.get("/auctions/stats")
async def auction_stats(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[BidApplicationService, Depends(get_bid_service)],
) -> ApiResponse:
    stats = await service.get_auction_stats(db)
    scheduler = getattr(request.app.state, "auction_scheduler", None)
    result = AuctionStatsResponse.from_domain(
        stats, scheduler.status() if scheduler is not None else None
    )
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = get_request_id(request)
    return resp


@router.post("/auctions/{product_id}/bids", status_code=201)
async def place_bid(
    product_id: str,
    req: PlaceBidRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(limit_bid_rate)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[BidApplicationService, Depends(get_bid_service)],
) -> ApiResponse:
    placed = await service.place_bid(db, product_id, str(current_user.id), req.amount_cents)
    resp = success_response(
        BidResponse.from_domain(placed.bid).model_dump(mode="json"),
        message="Bid placed successfully",
    )
    resp.request_id = get_request_id(request)
    return resp


@router.get("/auctions/{product_id}/bids")
async def list_bids(
    product_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[BidApplicationService, Depends(get_bid_service)],
    limit: int = Query(50, ge=1, le=200),
) -> ApiResponse:
    bids = await service.list_bids(db, product_id, limit)
    result = BidListResponse(
        product_id=product_id, items=[BidResponse.from_domain(b) for b in bids]
    )
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = get_request_id(request)
    return resp


@router.delete("/bids/{bid_id}")
async def cancel_bid(
    bid_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[BidApplicationService, Depends(get_bid_service)],
) -> ApiResponse:
    bid, highest = await service.cancel_bid(db, bid_id, str(current_user.id))
    result = CancelBidResponse(
        bid_id=bid.id, product_id=bid.product_id, current_highest_bid_cents=highest
    )
    resp = success_response(result.model_dump(), message="Bid cancelled")
    resp.request_id = get_request_id(request)
    return resp
