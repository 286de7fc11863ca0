"""
Outbound notifications.

- service: persist notifications and deliver them
- dispatcher: bounded, retrying asyncio job runner
- email: Resend REST client (mocked outside production setups)
- templates: subject and HTML per notification type
"""

from .dispatcher import NotificationDispatcher
from .email import EmailClient, EmailDeliveryError
from .service import NotificationService, notification_service

__all__ = [
    "EmailClient",
    "EmailDeliveryError",
    "NotificationDispatcher",
    "NotificationService",
    "notification_service",
]
