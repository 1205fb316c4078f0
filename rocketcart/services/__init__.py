"""Collaborators of the cart: inventory and notifications."""
from .inventory import InventoryClient, InventoryService
from .notifications import LogNotificationSink, NotificationSink, TelegramNotificationSink

__all__ = [
    "InventoryClient",
    "InventoryService",
    "LogNotificationSink",
    "NotificationSink",
    "TelegramNotificationSink",
]
