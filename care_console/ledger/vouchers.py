"""Voucher issuance: converts points into a printable discount voucher."""

from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation

from care_console.exceptions import InvalidRedemptionError, ValidationError
from care_console.ledger import history
from care_console.ledger.points import apply_entry
from care_console.models.customer import Customer, CustomerLogEntry, OrderStatus, utc_now
from care_console.models.ledger import VoucherIssuance
from care_console.models.voucher import Voucher

VOUCHER_VALIDITY_DAYS = 30
VOUCHER_CODE_PREFIX = "VCHR"


class VoucherCodeGenerator(history.SequentialCodeGenerator):
    """Issues ``VCHR-<epoch ms>`` voucher codes."""

    def __init__(self, prefix: str = VOUCHER_CODE_PREFIX):
        super().__init__(prefix)


default_code_generator = VoucherCodeGenerator()


def issue_voucher(
    customer: Customer,
    points_to_redeem: int,
    point_value: Decimal | int | float,
    *,
    now: datetime | None = None,
    codes: VoucherCodeGenerator | None = None,
    currency: str = "EGP",
    date_format: str = "%Y-%m-%d",
) -> VoucherIssuance:
    """
    Redeem points for a discount voucher.

    Args:
        customer: Current customer snapshot
        points_to_redeem: Points to convert (1..customer.points)
        point_value: Currency value of one point
        now: Issue timestamp
        codes: Code generator, the process-wide one by default
        currency: Currency label used in the history entry
        date_format: strftime format for the voucher's display dates

    Returns:
        VoucherIssuance with the ledger result and the voucher to print

    Raises:
        InvalidRedemptionError: If points_to_redeem is not in 1..customer.points
        ValidationError: If point_value is not positive
    """
    if (
        isinstance(points_to_redeem, bool)
        or not isinstance(points_to_redeem, int)
        or points_to_redeem <= 0
        or points_to_redeem > customer.points
    ):
        raise InvalidRedemptionError(available=customer.points, requested=points_to_redeem)

    rate = _as_rate(point_value)
    now = now or utc_now()
    codes = codes or default_code_generator

    discount_value = points_to_redeem * rate
    code = codes.next_code(now)
    detail = f"Issued discount voucher worth {format_amount(discount_value)} {currency}"

    entry = CustomerLogEntry(
        invoice_id=code,
        date=now,
        details=detail,
        status=OrderStatus.DELIVERED,
        feedback=None,
        points_change=-points_to_redeem,
        amount=Decimal("0"),
    )
    ledger = apply_entry(customer, entry, detail)

    expiry = now + timedelta(days=VOUCHER_VALIDITY_DAYS)
    voucher = Voucher(
        customer_name=customer.name,
        amount=discount_value,
        code=code,
        issue_date=now.strftime(date_format),
        expiry_date=expiry.strftime(date_format),
    )

    return VoucherIssuance(ledger=ledger, voucher=voucher)


def format_amount(value: Decimal) -> str:
    """Render a money amount without trailing zeros (300, 12.5)."""
    return f"{value.normalize():f}"


def _as_rate(point_value: Decimal | int | float) -> Decimal:
    try:
        rate = Decimal(str(point_value))
    except InvalidOperation:
        raise ValidationError("INVALID_POINT_VALUE", point_value=str(point_value))
    if not rate.is_finite() or rate <= 0:
        raise ValidationError("INVALID_POINT_VALUE", point_value=str(point_value))
    return rate
