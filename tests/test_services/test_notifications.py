"""Tests for notifiers and settings wiring."""

from decimal import Decimal

import pytest

from care_console.config import Settings
from care_console.services.notifications import (
    CollectingNotifier,
    LoggingNotifier,
    Notification,
    Severity,
)


def test_collecting_notifier_keeps_order() -> None:
    notifier = CollectingNotifier()

    notifier.notify(Notification(message="first"))
    notifier.notify(Notification(message="second", severity=Severity.ERROR))

    assert [n.message for n in notifier.notifications] == ["first", "second"]
    assert notifier.notifications[0].severity == Severity.INFO

    notifier.clear()
    assert notifier.notifications == []


def test_logging_notifier_accepts_notifications() -> None:
    LoggingNotifier().notify(Notification(message="Added 5 points.", severity=Severity.SUCCESS))


def test_settings_build_system_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POINT_VALUE", "0.5")
    monkeypatch.setenv("CURRENCY", "USD")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings()
    system = settings.system_settings()

    assert settings.log_level == "DEBUG"
    assert settings.request_timeout == 15.0
    assert system.point_value == Decimal("0.5")
    assert system.currency == "USD"


def test_settings_reject_unknown_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "LOUD")

    with pytest.raises(ValueError):
        Settings()
