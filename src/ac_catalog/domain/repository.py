# src/ac_catalog/domain/repository.py
"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ac_catalog.domain.models import Product


class ProductRepositoryProtocol(Protocol):
    async def get_by_id(self, db: AsyncSession, product_id: str) -> Product | None: ...

    async def get_for_update(self, db: AsyncSession, product_id: str) -> Product | None: ...

    async def list_ended_auctions(self, db: AsyncSession, now: datetime) -> list[Product]: ...

    async def raise_highest_bid(
        self, db: AsyncSession, product_id: str, amount_cents: int
    ) -> bool: ...

    async def set_highest_bid(
        self, db: AsyncSession, product_id: str, amount_cents: int
    ) -> None: ...

    async def close_auction(
        self, db: AsyncSession, product_id: str, new_status: str
    ) -> bool: ...

    async def decrement_stock(
        self, db: AsyncSession, product_id: str, quantity: int
    ) -> bool: ...

    async def count_auctions_by_status(self, db: AsyncSession) -> dict[str, int]: ...
