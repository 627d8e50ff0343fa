"""LoggingNotifier: default delivery adapter.

Writes each message to the `ac.notifications` logger instead of a device.
Used in local dev and wherever no push transport is wired in.
"""

import logging

from src.ac_notification.domain.models import NotificationMessage

logger = logging.getLogger("ac.notifications")


class LoggingNotifier:
    async def notify(self, user_id: str, message: NotificationMessage) -> bool:
        logger.info(
            "notify user=%s type=%s title=%r data=%s",
            user_id,
            message.data.get("type", "-"),
            message.title,
            message.data,
        )
        return True
