"""Printable voucher."""

from pydantic import ConfigDict

from care_console.models.base import Money, WireModel


class Voucher(WireModel):
    """Discount voucher handed to the printing collaborator.

    Dates are display strings, not timestamps.
    """

    model_config = ConfigDict(frozen=True)

    customer_name: str
    amount: Money
    code: str
    issue_date: str
    expiry_date: str
