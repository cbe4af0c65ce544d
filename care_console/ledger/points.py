"""
Loyalty ledger: point grants, deductions and purchase completion.

Each operation validates its input against a caller-supplied snapshot and
returns a LedgerResult (new snapshot, partial update for the data store,
human-readable action detail). The input snapshot is never modified; a
rejected operation raises before anything is computed.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from care_console.exceptions import InsufficientBalanceError, ValidationError
from care_console.ledger import history
from care_console.models.customer import Customer, CustomerLogEntry, OrderStatus, utc_now
from care_console.models.ledger import CustomerUpdate, LedgerResult

ADJUSTMENT_PREFIX = "ADJ"

default_adjustment_ids = history.SequentialCodeGenerator(ADJUSTMENT_PREFIX)


def grant(
    customer: Customer,
    amount: int,
    reason: str,
    *,
    now: datetime | None = None,
    ids: history.SequentialCodeGenerator | None = None,
) -> LedgerResult:
    """
    Add points to a customer's balance.

    Args:
        customer: Current customer snapshot
        amount: Points to add (must be positive)
        reason: Why the points are granted
        now: Timestamp for the history entry
        ids: Adjustment id generator, the process-wide one by default

    Returns:
        LedgerResult with points and total_points_earned increased

    Raises:
        ValidationError: If amount <= 0 or reason is blank
    """
    _require_positive(amount)
    reason = _require_reason(reason)
    now = now or utc_now()

    detail = f"Granted {amount} points: {reason}"
    entry = CustomerLogEntry(
        invoice_id=(ids or default_adjustment_ids).next_code(now),
        date=now,
        details=detail,
        status=OrderStatus.DELIVERED,
        feedback=None,
        points_change=amount,
        amount=Decimal("0"),
    )
    return apply_entry(customer, entry, detail)


def deduct(
    customer: Customer,
    amount: int,
    reason: str,
    *,
    now: datetime | None = None,
    ids: history.SequentialCodeGenerator | None = None,
) -> LedgerResult:
    """
    Remove points from a customer's balance.

    Args:
        customer: Current customer snapshot
        amount: Points to remove (must be positive)
        reason: Why the points are deducted
        now: Timestamp for the history entry
        ids: Adjustment id generator, the process-wide one by default

    Returns:
        LedgerResult with points decreased and total_points_used increased

    Raises:
        ValidationError: If amount <= 0 or reason is blank
        InsufficientBalanceError: If amount exceeds the current balance
    """
    _require_positive(amount)
    reason = _require_reason(reason)
    if amount > customer.points:
        raise InsufficientBalanceError(available=customer.points, requested=amount)
    now = now or utc_now()

    detail = f"Deducted {amount} points: {reason}"
    entry = CustomerLogEntry(
        invoice_id=(ids or default_adjustment_ids).next_code(now),
        date=now,
        details=detail,
        status=OrderStatus.DELIVERED,
        feedback=None,
        points_change=-amount,
        amount=Decimal("0"),
    )
    return apply_entry(customer, entry, detail)


def record_purchase(
    customer: Customer,
    invoice_id: str,
    amount: Decimal,
    points_earned: int,
    *,
    status: OrderStatus = OrderStatus.DELIVERED,
    now: datetime | None = None,
) -> LedgerResult:
    """
    Record a completed purchase and the points it earned.

    Raises:
        ValidationError: If invoice_id is blank or amount/points are negative
    """
    if not invoice_id or not invoice_id.strip():
        raise ValidationError("MISSING_INVOICE")
    amount = Decimal(str(amount))
    if amount < 0:
        raise ValidationError("INVALID_AMOUNT", message="Purchase amount cannot be negative", amount=str(amount))
    if isinstance(points_earned, bool) or not isinstance(points_earned, int) or points_earned < 0:
        raise ValidationError("INVALID_AMOUNT", message="Earned points cannot be negative", amount=points_earned)
    now = now or utc_now()

    detail = f"Purchase {invoice_id.strip()} for {amount}"
    entry = CustomerLogEntry(
        invoice_id=invoice_id.strip(),
        date=now,
        details=detail,
        status=status,
        feedback=None,
        points_change=points_earned,
        amount=amount,
    )
    return apply_entry(
        customer,
        entry,
        detail,
        total_purchases=customer.total_purchases + amount,
        purchase_count=customer.purchase_count + 1,
        last_purchase_date=now,
    )


def apply_entry(
    customer: Customer,
    entry: CustomerLogEntry,
    action_detail: str,
    **changes: Any,
) -> LedgerResult:
    """
    Apply an entry's point change to the balance and counters, then log it.

    Positive changes count towards total_points_earned, negative ones towards
    total_points_used. Extra keyword changes are copied onto the snapshot and
    into the update payload.
    """
    delta = entry.points_change
    points = customer.points + delta
    if points < 0:
        raise InsufficientBalanceError(available=customer.points, requested=-delta)

    fields: dict[str, Any] = {"points": points}
    if delta > 0:
        fields["total_points_earned"] = customer.total_points_earned + delta
    elif delta < 0:
        fields["total_points_used"] = customer.total_points_used - delta
    fields.update(changes)

    updated = history.append(customer.model_copy(update=fields), entry)
    update = CustomerUpdate(**fields, log=updated.log)

    return LedgerResult(
        customer=updated,
        update=update,
        action_detail=action_detail,
        entry=entry,
    )


def _require_positive(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValidationError("INVALID_AMOUNT", amount=amount)


def _require_reason(reason: str | None) -> str:
    if reason is None or not reason.strip():
        raise ValidationError("MISSING_REASON")
    return reason.strip()
