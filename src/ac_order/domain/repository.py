# src/ac_order/domain/repository.py
"""OrderRepository Protocol: interface contract for persistence layer."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ac_order.domain.models import Order


class OrderRepositoryProtocol(Protocol):
    async def save(self, db: AsyncSession, order: Order) -> None: ...

    async def get_by_id(self, db: AsyncSession, order_id: str) -> Order | None: ...

    async def update_status(self, db: AsyncSession, order_id: str, status: str) -> bool: ...

    async def attach_payment(
        self,
        db: AsyncSession,
        order_id: str,
        invoice_id: str,
        payment_id: str,
        payment_url: str,
    ) -> None: ...
