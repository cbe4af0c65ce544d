"""Application services."""

from care_console.services.notifications import (
    CollectingNotifier,
    LoggingNotifier,
    Notification,
    Notifier,
    Severity,
)
from care_console.services.profile import ActionResult, CustomerProfileService

__all__ = [
    "ActionResult",
    "CollectingNotifier",
    "CustomerProfileService",
    "LoggingNotifier",
    "Notification",
    "Notifier",
    "Severity",
]
