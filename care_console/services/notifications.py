"""User feedback notifications."""

from enum import Enum
from typing import Protocol

from pydantic import BaseModel

from care_console.utils.logging import get_logger

logger = get_logger(__name__)


class Severity(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class Notification(BaseModel):
    """A toast message for the console user."""

    message: str
    severity: Severity = Severity.INFO


class Notifier(Protocol):
    def notify(self, notification: Notification) -> None: ...


class LoggingNotifier:
    """Writes notifications to the application log."""

    def notify(self, notification: Notification) -> None:
        logger.info(
            "notification",
            severity=notification.severity.value,
            message=notification.message,
        )


class CollectingNotifier:
    """Keeps notifications in memory so a response can carry them."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def clear(self) -> None:
        self.notifications.clear()
