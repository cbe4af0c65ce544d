"""Loyalty ledger, voucher issuance and customer history."""

from care_console.ledger.history import (
    SequentialCodeGenerator,
    append,
    append_impression,
    balance_from_log,
    entries,
)
from care_console.ledger.points import apply_entry, deduct, grant, record_purchase
from care_console.ledger.vouchers import (
    VOUCHER_VALIDITY_DAYS,
    VoucherCodeGenerator,
    issue_voucher,
)

__all__ = [
    "append",
    "append_impression",
    "apply_entry",
    "balance_from_log",
    "deduct",
    "entries",
    "grant",
    "issue_voucher",
    "record_purchase",
    "SequentialCodeGenerator",
    "VOUCHER_VALIDITY_DAYS",
    "VoucherCodeGenerator",
]
