"""PaymentSessionService: open a gateway session for an already-committed order.

Always runs AFTER the order's own transaction has committed. A gateway or
storage failure never undoes the order; it is downgraded to a warning string
the caller can surface (checkout) or log (auction resolution).
"""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from src.ac_common.errors import AppError
from src.ac_order.domain.models import Order
from src.ac_order.domain.repository import OrderRepositoryProtocol
from src.ac_order.infrastructure.persistence import OrderRepository
from src.ac_payment.domain.models import PaymentRequest, PaymentSession
from src.ac_payment.infrastructure.gateway_client import PaymentGatewayClient

logger = logging.getLogger(__name__)


@dataclass
class PaymentCustomer:
    name: str
    email: str
    address: str | None = None


@dataclass
class PaymentAttempt:
    session: PaymentSession | None = None
    warning: str | None = None


class PaymentSessionService:
    def __init__(
        self,
        gateway: PaymentGatewayClient | None = None,
        order_repo: OrderRepositoryProtocol | None = None,
    ) -> None:
        self._gateway = gateway or PaymentGatewayClient()
        self._order_repo: OrderRepositoryProtocol = order_repo or OrderRepository()

    @property
    def gateway(self) -> PaymentGatewayClient:
        return self._gateway

    async def start_for_order(
        self, db: AsyncSession, order: Order, customer: PaymentCustomer
    ) -> PaymentAttempt:
        """Create a session and store its ids on the order in a fresh transaction."""
        request = PaymentRequest(
            order_id=order.id,
            amount_cents=order.total_amount_cents,
            customer_name=customer.name,
            customer_email=customer.email,
            customer_address=customer.address or order.shipping_address,
        )
        try:
            session = await self._gateway.create_payment_session(request)
        except AppError as exc:
            logger.warning(
                "Payment session for order %s not created: [%d] %s",
                order.id,
                exc.code,
                exc.message,
            )
            return PaymentAttempt(warning=f"Payment session not created: {exc.message}")

        try:
            await self._order_repo.attach_payment(
                db, order.id, session.invoice_id, session.payment_id, session.payment_url
            )
            await db.commit()
        except Exception:
            await db.rollback()
            logger.exception(
                "Payment session %s created but not stored on order %s",
                session.invoice_id,
                order.id,
            )
            return PaymentAttempt(
                session=session, warning="Payment session created but could not be saved"
            )

        order.invoice_id = session.invoice_id
        order.payment_id = session.payment_id
        order.payment_url = session.payment_url
        return PaymentAttempt(session=session)
