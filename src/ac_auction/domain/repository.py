"""BidRepository Protocol: interface contract for persistence layer."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ac_auction.domain.models import Bid


class BidRepositoryProtocol(Protocol):
    async def save(self, db: AsyncSession, bid: Bid) -> None: ...

    async def get_by_id(self, db: AsyncSession, bid_id: str) -> Bid | None: ...

    async def list_top_bids(self, db: AsyncSession, product_id: str) -> list[Bid]: ...

    async def list_by_product(
        self, db: AsyncSession, product_id: str, limit: int
    ) -> list[Bid]: ...

    async def max_amount(self, db: AsyncSession, product_id: str) -> int | None: ...

    async def delete(self, db: AsyncSession, bid_id: str) -> None: ...

    async def count_all(self, db: AsyncSession) -> int: ...
