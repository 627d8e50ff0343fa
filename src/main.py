"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.ac_auction.api.router import router as auction_router
from src.ac_auction.application.scheduler import AuctionScheduler
from src.ac_common.database import check_database, dispose_engine
from src.ac_common.errors import AppError
from src.ac_common.redis_client import check_redis, close_redis
from src.ac_common.response import error_response
from src.ac_gateway.middleware.request_log import RequestLogMiddleware, get_request_id
from src.ac_order.api.router import router as order_router
from src.ac_payment.api.router import router as payment_router

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Check PostgreSQL and Redis, then run the auction sweep until shutdown."""
    await check_database()
    await check_redis()

    scheduler = AuctionScheduler()
    app.state.auction_scheduler = scheduler
    if settings.AUCTION_SCHEDULER_ENABLED:
        scheduler.start(settings.AUCTION_CHECK_INTERVAL_MINUTES)
    else:
        logger.info("Auction scheduler disabled")
    try:
        yield
    finally:
        await scheduler.stop()
        await dispose_engine()
        await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    resp.request_id = get_request_id(request)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(auction_router, prefix="/api/v1")
app.include_router(order_router, prefix="/api/v1")
app.include_router(payment_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
