"""Notifier Protocol: the push-delivery capability.

Delivery (FCM, APNs, ...) is owned by an external transport. Implementations
return True when at least one device accepted the message. They may also
raise; NotificationService treats both as non-fatal.
"""

from typing import Protocol

from src.ac_notification.domain.models import NotificationMessage


class NotifierProtocol(Protocol):
    async def notify(self, user_id: str, message: NotificationMessage) -> bool: ...
