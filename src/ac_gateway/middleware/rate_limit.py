"""Per-user bid rate limiting.

Fixed one-minute window counted in Redis:
    key   = "ratelimit:{user_id}:bids"
    count = INCR key; EXPIRE key 60 on the first hit
    count > BID_RATE_LIMIT_PER_MINUTE  ->  RateLimitError (9001, 429)

Wired as a route dependency (it needs the authenticated user, which a
Starlette middleware does not have).
"""

from typing import Annotated

from fastapi import Depends

from config.settings import settings
from src.ac_common.errors import RateLimitError
from src.ac_common.redis_client import get_redis
from src.ac_gateway.auth.dependencies import get_current_user
from src.ac_gateway.user.db_models import UserModel

_WINDOW_SECONDS = 60


class FixedWindowRateLimiter:
    def __init__(self, group: str, limit: int, window_seconds: int = _WINDOW_SECONDS) -> None:
        self._group = group
        self._limit = limit
        self._window = window_seconds

    def key_for(self, subject: str) -> str:
        return f"ratelimit:{subject}:{self._group}"

    async def hit(self, redis: object, subject: str) -> int:
        """Count one request for `subject`; raise once the window is exhausted."""
        key = self.key_for(subject)
        count = int(await redis.incr(key))  # type: ignore[attr-defined]
        if count == 1:
            await redis.expire(key, self._window)  # type: ignore[attr-defined]
        if count > self._limit:
            raise RateLimitError()
        return count


bid_rate_limiter = FixedWindowRateLimiter("bids", settings.BID_RATE_LIMIT_PER_MINUTE)


async def limit_bid_rate(
    current_user: Annotated[UserModel, Depends(get_current_user)],
) -> UserModel:
    redis = await get_redis()
    await bid_rate_limiter.hit(redis, str(current_user.id))
    return current_user
