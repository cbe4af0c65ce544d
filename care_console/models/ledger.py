"""Results produced by the loyalty ledger."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from care_console.models.base import Money, WireModel
from care_console.models.customer import Customer, CustomerImpression, CustomerLogEntry
from care_console.models.voucher import Voucher


class CustomerUpdate(WireModel):
    """Partial customer payload sent to the data store.

    Only the fields an operation touched are set; ``to_wire`` omits the rest.
    """

    points: int | None = None
    total_points_earned: int | None = None
    total_points_used: int | None = None
    total_purchases: Money | None = None
    purchase_count: int | None = None
    last_purchase_date: datetime | None = None
    log: list[CustomerLogEntry] | None = None
    impressions: list[CustomerImpression] | None = None

    def to_wire(self, **kwargs) -> dict:
        # exclude_unset would also strip defaulted fields inside log entries
        data = super().to_wire(**kwargs)
        touched = {to_camel(name) for name in self.model_fields_set}
        return {key: value for key, value in data.items() if key in touched}


class LedgerResult(BaseModel):
    """New customer snapshot plus the update that produces it."""

    model_config = ConfigDict(frozen=True)

    customer: Customer
    update: CustomerUpdate
    action_detail: str
    entry: CustomerLogEntry | None = None


class VoucherIssuance(BaseModel):
    """Outcome of redeeming points for a voucher."""

    model_config = ConfigDict(frozen=True)

    ledger: LedgerResult
    voucher: Voucher
