"""Customer profile actions.

Runs a staff action end to end: permission check, ledger computation, save
through the injected store, and a notification describing the outcome.
Errors never escape; they become an ActionResult with ``success=False``.
"""

from datetime import datetime
from typing import Callable
from uuid import uuid4

from pydantic import BaseModel

from care_console.api.client import CustomerStore
from care_console.exceptions import (
    ActionNotPermittedError,
    ConflictError,
    ConsoleError,
    PersistenceError,
    ValidationError,
)
from care_console.ledger import history, points, vouchers
from care_console.models.customer import (
    Customer,
    CustomerImpression,
    DiscoveryChannel,
    utc_now,
)
from care_console.models.ledger import CustomerUpdate, LedgerResult
from care_console.models.staff import StaffMember
from care_console.models.system import SystemSettings
from care_console.models.voucher import Voucher
from care_console.services.notifications import Notification, Notifier, Severity
from care_console.utils.logging import ActionLogger

CONFLICT_MESSAGE = "This customer was changed by someone else. Reload the profile and try again."
SAVE_FAILED_MESSAGE = "Could not save changes. Please try again."


class ActionResult(BaseModel):
    """Outcome of a profile action."""

    action: str
    success: bool
    notification: Notification
    customer: Customer | None = None
    voucher: Voucher | None = None
    error_code: str | None = None


# What an action computes before saving: the ledger result, an optional
# voucher and the success message.
Computation = tuple[LedgerResult, Voucher | None, str]


class CustomerProfileService:
    """Staff actions on a single customer profile."""

    def __init__(
        self,
        store: CustomerStore,
        notifier: Notifier,
        settings: SystemSettings,
        *,
        codes: vouchers.VoucherCodeGenerator | None = None,
        adjustment_ids: history.SequentialCodeGenerator | None = None,
        date_format: str = "%Y-%m-%d",
    ):
        self.store = store
        self.notifier = notifier
        self.settings = settings
        self.codes = codes
        self.adjustment_ids = adjustment_ids
        self.date_format = date_format
        self.logger = ActionLogger("customer_profile")

    async def grant_points(
        self,
        customer: Customer,
        amount: int,
        reason: str,
        performed_by: StaffMember,
    ) -> ActionResult:
        """Manually grant points."""

        def compute() -> Computation:
            result = points.grant(customer, amount, reason, ids=self.adjustment_ids)
            return result, None, f"Added {amount} points."

        return await self._run("grant_points", customer, performed_by, compute)

    async def deduct_points(
        self,
        customer: Customer,
        amount: int,
        reason: str,
        performed_by: StaffMember,
    ) -> ActionResult:
        """Manually deduct points."""

        def compute() -> Computation:
            result = points.deduct(customer, amount, reason, ids=self.adjustment_ids)
            return result, None, f"Deducted {amount} points."

        return await self._run("deduct_points", customer, performed_by, compute)

    async def issue_voucher(
        self,
        customer: Customer,
        points_to_redeem: int,
        performed_by: StaffMember,
    ) -> ActionResult:
        """Redeem points for a discount voucher at the configured point value."""

        def compute() -> Computation:
            issuance = vouchers.issue_voucher(
                customer,
                points_to_redeem,
                self.settings.point_value,
                codes=self.codes,
                currency=self.settings.currency,
                date_format=self.date_format,
            )
            amount = vouchers.format_amount(issuance.voucher.amount)
            message = f"Issued a voucher worth {amount} {self.settings.currency}."
            return issuance.ledger, issuance.voucher, message

        return await self._run("issue_voucher", customer, performed_by, compute)

    async def record_impression(
        self,
        customer: Customer,
        performed_by: StaffMember,
        *,
        product_quality_rating: int,
        branch_experience_rating: int,
        branch_id: str,
        product_quality_notes: str | None = None,
        branch_experience_notes: str | None = None,
        discovery_channel: DiscoveryChannel | None = None,
        is_first_visit: bool = False,
        related_invoice_ids: list[str] | None = None,
        visit_time: str | None = None,
        now: datetime | None = None,
    ) -> ActionResult:
        """Record a visit impression for the customer."""

        def compute() -> Computation:
            impression = new_impression(
                performed_by,
                product_quality_rating=product_quality_rating,
                branch_experience_rating=branch_experience_rating,
                branch_id=branch_id,
                product_quality_notes=product_quality_notes,
                branch_experience_notes=branch_experience_notes,
                discovery_channel=discovery_channel,
                is_first_visit=is_first_visit,
                related_invoice_ids=related_invoice_ids,
                visit_time=visit_time,
                now=now,
            )
            updated = history.append_impression(customer, impression)
            result = LedgerResult(
                customer=updated,
                update=CustomerUpdate(impressions=updated.impressions),
                action_detail="Recorded a new impression",
            )
            return result, None, "Impression recorded."

        return await self._run("record_impression", customer, performed_by, compute)

    async def _run(
        self,
        action: str,
        customer: Customer,
        performed_by: StaffMember,
        compute: Callable[[], Computation],
    ) -> ActionResult:
        try:
            if not performed_by.can_modify_customers:
                raise ActionNotPermittedError("ACTION_NOT_PERMITTED", role=performed_by.role.value)

            result, voucher, message = compute()

            saved = await self.store.update_customer(
                customer.id,
                result.update,
                expected_version=customer.version,
                action_detail=result.action_detail,
            )

        except ConflictError as e:
            self.logger.log_persistence_failure(
                action, customer.id, str(e), code=e.code, expected_version=customer.version
            )
            return self._fail(action, e.code, CONFLICT_MESSAGE)

        except PersistenceError as e:
            self.logger.log_persistence_failure(action, customer.id, str(e), code=e.code)
            return self._fail(action, e.code, SAVE_FAILED_MESSAGE)

        except ConsoleError as e:
            self.logger.log_rejection(action, customer.id, e.code, performed_by=performed_by.id)
            return self._fail(action, e.code, e.message)

        self.logger.log_action(
            action,
            customer.id,
            performed_by.id,
            result.action_detail,
            points=saved.points,
            version=saved.version,
        )

        notification = Notification(message=message, severity=Severity.SUCCESS)
        self.notifier.notify(notification)

        return ActionResult(
            action=action,
            success=True,
            notification=notification,
            customer=saved,
            voucher=voucher,
        )

    def _fail(self, action: str, code: str, message: str) -> ActionResult:
        notification = Notification(message=message, severity=Severity.ERROR)
        self.notifier.notify(notification)
        return ActionResult(
            action=action,
            success=False,
            notification=notification,
            error_code=code,
        )


def new_impression(
    performed_by: StaffMember,
    *,
    product_quality_rating: int,
    branch_experience_rating: int,
    branch_id: str,
    product_quality_notes: str | None = None,
    branch_experience_notes: str | None = None,
    discovery_channel: DiscoveryChannel | None = None,
    is_first_visit: bool = False,
    related_invoice_ids: list[str] | None = None,
    visit_time: str | None = None,
    now: datetime | None = None,
) -> CustomerImpression:
    """Validate and build an impression recorded by ``performed_by``."""
    for rating in (product_quality_rating, branch_experience_rating):
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            raise ValidationError("INVALID_RATING", rating=rating)
    if not branch_id or not branch_id.strip():
        raise ValidationError("MISSING_BRANCH")

    return CustomerImpression(
        id=str(uuid4()),
        date=now or utc_now(),
        recorded_by_user_id=performed_by.id,
        recorded_by_user_name=performed_by.name,
        product_quality_rating=product_quality_rating,
        product_quality_notes=(product_quality_notes or "").strip() or None,
        branch_experience_rating=branch_experience_rating,
        branch_experience_notes=(branch_experience_notes or "").strip() or None,
        discovery_channel=discovery_channel,
        is_first_visit=is_first_visit,
        related_invoice_ids=related_invoice_ids or [],
        branch_id=branch_id.strip(),
        visit_time=visit_time or None,
    )
