"""NotificationService: builds event messages and delivers them best-effort.

Every public method returns False instead of raising: a notification can
never fail or roll back the bid, auction resolution or webhook that
triggered it.
"""

import logging

from src.ac_common.cents import cents_to_amount_str, cents_to_display
from src.ac_common.datetime_utils import iso_now
from src.ac_common.enums import NotificationType, OrderStatus
from src.ac_notification.domain.models import NotificationMessage
from src.ac_notification.domain.notifier import NotifierProtocol
from src.ac_notification.infrastructure.logging_notifier import LoggingNotifier

logger = logging.getLogger(__name__)

_PAYMENT_STATUS_TEXT: dict[str, tuple[str, str]] = {
    OrderStatus.PAID.value: (
        "Payment Successful!",
        "Your payment for order {order_id} has been confirmed. Your order is being processed.",
    ),
    OrderStatus.FAILED.value: (
        "Payment Failed",
        "Your payment for order {order_id} failed. Please try again or contact support.",
    ),
    OrderStatus.PENDING_PAYMENT.value: (
        "Payment Pending",
        "Your payment for order {order_id} is being processed. "
        "We'll notify you once it's confirmed.",
    ),
}


class NotificationService:
    def __init__(self, notifier: NotifierProtocol | None = None) -> None:
        self._notifier: NotifierProtocol = notifier or LoggingNotifier()

    async def send(self, user_id: str, message: NotificationMessage) -> bool:
        try:
            delivered = await self._notifier.notify(user_id, message)
        except Exception:
            logger.exception(
                "Notification to user %s failed (type=%s)",
                user_id,
                message.data.get("type"),
            )
            return False
        if not delivered:
            logger.info("Notification to user %s was not delivered", user_id)
        return delivered

    async def send_outbid(
        self, user_id: str, product_id: str, product_name: str, new_amount_cents: int
    ) -> bool:
        message = NotificationMessage(
            title="You've been outbid!",
            body=(
                f"Someone placed a higher bid of {cents_to_display(new_amount_cents)} "
                f'on "{product_name}". Place a new bid to stay in the auction!'
            ),
            data={
                "type": NotificationType.OUTBID.value,
                "productId": product_id,
                "productName": product_name,
                "newBidAmount": cents_to_amount_str(new_amount_cents),
                "timestamp": iso_now(),
            },
        )
        return await self.send(user_id, message)

    async def send_auction_won(
        self,
        user_id: str,
        product_id: str,
        product_name: str,
        order_id: str,
        winning_amount_cents: int,
    ) -> bool:
        message = NotificationMessage(
            title="Congratulations! You won the auction!",
            body=(
                f'You won the auction for "{product_name}" with a bid of '
                f"{cents_to_display(winning_amount_cents)}. Please complete your payment."
            ),
            data={
                "type": NotificationType.AUCTION_WON.value,
                "productId": product_id,
                "productName": product_name,
                "orderId": order_id,
                "winningBid": cents_to_amount_str(winning_amount_cents),
                "timestamp": iso_now(),
            },
        )
        return await self.send(user_id, message)

    async def send_payment_status(
        self, user_id: str, order_id: str, status: str, total_amount_cents: int
    ) -> bool:
        if status in _PAYMENT_STATUS_TEXT:
            title, template = _PAYMENT_STATUS_TEXT[status]
            body = template.format(order_id=order_id)
        else:
            title = "Payment Update"
            body = f"Your payment status for order {order_id} has been updated to: {status}"
        message = NotificationMessage(
            title=title,
            body=body,
            data={
                "type": NotificationType.PAYMENT_STATUS_UPDATE.value,
                "orderId": order_id,
                "status": status,
                "amount": cents_to_amount_str(total_amount_cents),
                "timestamp": iso_now(),
            },
        )
        return await self.send(user_id, message)
