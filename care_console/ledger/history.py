"""Append-only customer history.

The log is stored most-recent-first, the way the data store keeps it.
Entries are frozen records; these helpers only ever build new lists.
"""

from datetime import datetime, timezone

from care_console.models.customer import Customer, CustomerImpression, CustomerLogEntry


def append(customer: Customer, entry: CustomerLogEntry) -> Customer:
    """Return a new snapshot with ``entry`` at the head of the log."""
    return customer.model_copy(update={"log": [entry, *customer.log]})


def append_impression(customer: Customer, impression: CustomerImpression) -> Customer:
    """Return a new snapshot with ``impression`` added after the existing ones."""
    return customer.model_copy(update={"impressions": [*customer.impressions, impression]})


def entries(customer: Customer) -> list[CustomerLogEntry]:
    """Most-recent-first view of the log. Ties keep their stored order."""
    return sorted(customer.log, key=lambda entry: _as_utc(entry.date), reverse=True)


def balance_from_log(customer: Customer) -> int:
    """Sum of every recorded point change."""
    return sum(entry.points_change for entry in customer.log)


class SequentialCodeGenerator:
    """Issues ``<prefix>-<epoch ms>`` ids, strictly increasing within the process.

    Two ids requested in the same millisecond get consecutive values.
    """

    def __init__(self, prefix: str):
        self.prefix = prefix
        self._last_millis = 0

    def next_code(self, now: datetime) -> str:
        millis = epoch_millis(now)
        if millis <= self._last_millis:
            millis = self._last_millis + 1
        self._last_millis = millis
        return f"{self.prefix}-{millis}"


def epoch_millis(moment: datetime) -> int:
    return int(_as_utc(moment).timestamp() * 1000)


def _as_utc(moment: datetime) -> datetime:
    # Imported records may carry naive timestamps
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment
