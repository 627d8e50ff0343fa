"""PaymentReconciliationService: apply a gateway webhook to its order.

Steps, each a hard stop on failure (the order is never touched):
  1. signature   X-Signature = hex HMAC-SHA256(raw body, webhook secret)
  2. payload     JSON object carrying InvoiceId
  3. mapping     order reference + InvoiceStatus -> order status
  4. lookup      order must exist
Then the status is written (skipped when unchanged) and committed, and the
owner gets a best-effort payment-status notification.
"""

import json
import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.ac_common.errors import (
    InvalidCallbackPayloadError,
    InvalidWebhookSignatureError,
    OrderNotFoundError,
)
from src.ac_notification.application.service import NotificationService
from src.ac_order.domain.repository import OrderRepositoryProtocol
from src.ac_order.infrastructure.persistence import OrderRepository
from src.ac_payment.domain.callback import parse_payment_callback
from src.ac_payment.domain.signature import verify_signature

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationResult:
    order_id: str
    status: str
    previous_status: str
    updated: bool


class PaymentReconciliationService:
    def __init__(
        self,
        order_repo: OrderRepositoryProtocol | None = None,
        notifications: NotificationService | None = None,
        webhook_secret: str | None = None,
        require_signature: bool | None = None,
    ) -> None:
        self._order_repo: OrderRepositoryProtocol = order_repo or OrderRepository()
        self._notifications = notifications or NotificationService()
        self._secret = (
            webhook_secret if webhook_secret is not None else settings.payment_webhook_secret
        )
        self._require_signature = (
            require_signature
            if require_signature is not None
            else settings.PAYMENT_WEBHOOK_REQUIRE_SIGNATURE
        )

    def check_signature(self, raw_body: bytes, signature: str | None) -> None:
        if not signature:
            if self._require_signature:
                raise InvalidWebhookSignatureError()
            logger.warning("Payment webhook received without X-Signature header")
            return
        if not verify_signature(raw_body, signature, self._secret):
            logger.warning("Payment webhook rejected: signature mismatch")
            raise InvalidWebhookSignatureError()

    async def handle_callback(
        self, db: AsyncSession, raw_body: bytes, signature: str | None
    ) -> ReconciliationResult:
        self.check_signature(raw_body, signature)

        try:
            payload = json.loads(raw_body)
        except (ValueError, UnicodeDecodeError) as exc:
            raise InvalidCallbackPayloadError("Body is not valid JSON") from exc
        if not isinstance(payload, dict):
            raise InvalidCallbackPayloadError("Body must be a JSON object")
        if not payload.get("InvoiceId"):
            raise InvalidCallbackPayloadError("InvoiceId is required")

        callback = parse_payment_callback(payload)
        logger.info(
            "Payment callback: invoice=%s order=%s gateway_status=%s -> %s",
            callback.invoice_id,
            callback.order_id,
            callback.gateway_status,
            callback.status,
        )

        order = await self._order_repo.get_by_id(db, callback.order_id)
        if order is None:
            raise OrderNotFoundError(callback.order_id)

        previous_status = order.status
        if previous_status == callback.status:
            logger.info(
                "Order %s already %s, nothing to update", order.id, previous_status
            )
            return ReconciliationResult(
                order_id=order.id,
                status=callback.status,
                previous_status=previous_status,
                updated=False,
            )

        try:
            await self._order_repo.update_status(db, order.id, callback.status)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Order %s status %s -> %s", order.id, previous_status, callback.status
        )
        await self._notifications.send_payment_status(
            order.user_id, order.id, callback.status, order.total_amount_cents
        )
        return ReconciliationResult(
            order_id=order.id,
            status=callback.status,
            previous_status=previous_status,
            updated=True,
        )
