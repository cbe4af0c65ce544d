"""Tests for the customer profile actions."""

from datetime import datetime

import httpx
import pytest

from care_console.api.client import ConsoleApiClient
from care_console.exceptions import ConflictError, PersistenceError, ValidationError
from care_console.models.customer import Customer, DiscoveryChannel
from care_console.models.staff import StaffMember
from care_console.models.system import SystemSettings
from care_console.services.notifications import CollectingNotifier, Severity
from care_console.services.profile import (
    CONFLICT_MESSAGE,
    SAVE_FAILED_MESSAGE,
    CustomerProfileService,
    new_impression,
)


@pytest.mark.asyncio
async def test_grant_points_saves_and_notifies(
    profile_service: CustomerProfileService,
    sample_customer: Customer,
    staff_member: StaffMember,
    store,
    notifier: CollectingNotifier,
) -> None:
    """A successful grant is saved against the version that was read."""
    result = await profile_service.grant_points(sample_customer, 100, "Complaint", staff_member)

    assert result.success
    assert result.customer.points == 1100
    assert result.customer.version == 4
    assert result.notification.message == "Added 100 points."
    assert result.notification.severity == Severity.SUCCESS
    assert notifier.notifications == [result.notification]

    customer_id, update, detail = store.updates[0]
    assert customer_id == "5001"
    assert update.points == 1100
    assert detail == "Granted 100 points: Complaint"


@pytest.mark.asyncio
async def test_deduct_points(
    profile_service: CustomerProfileService,
    sample_customer: Customer,
    staff_member: StaffMember,
) -> None:
    result = await profile_service.deduct_points(sample_customer, 250, "Returned order", staff_member)

    assert result.success
    assert result.customer.points == 750
    assert result.customer.total_points_used == 450
    assert result.notification.message == "Deducted 250 points."


@pytest.mark.asyncio
async def test_rejected_deduction_is_not_saved(
    profile_service: CustomerProfileService,
    sample_customer: Customer,
    staff_member: StaffMember,
    store,
    notifier: CollectingNotifier,
) -> None:
    """Validation failures surface as error notifications, nothing is written."""
    result = await profile_service.deduct_points(sample_customer, 1500, "Too much", staff_member)

    assert not result.success
    assert result.error_code == "INSUFFICIENT_POINTS"
    assert result.customer is None
    assert notifier.notifications[0].severity == Severity.ERROR
    assert store.updates == []
    assert store.customers["5001"].points == 1000


@pytest.mark.asyncio
async def test_missing_reason(
    profile_service: CustomerProfileService,
    sample_customer: Customer,
    staff_member: StaffMember,
) -> None:
    result = await profile_service.grant_points(sample_customer, 10, " ", staff_member)

    assert result.error_code == "MISSING_REASON"
    assert result.notification.message == "A reason is required"


@pytest.mark.asyncio
async def test_moderator_is_refused(
    profile_service: CustomerProfileService,
    sample_customer: Customer,
    moderator: StaffMember,
    store,
) -> None:
    result = await profile_service.issue_voucher(sample_customer, 100, moderator)

    assert not result.success
    assert result.error_code == "ACTION_NOT_PERMITTED"
    assert store.updates == []


@pytest.mark.asyncio
async def test_issue_voucher(
    profile_service: CustomerProfileService,
    sample_customer: Customer,
    staff_member: StaffMember,
) -> None:
    result = await profile_service.issue_voucher(sample_customer, 300, staff_member)

    assert result.success
    assert result.voucher.amount == 300
    assert result.voucher.customer_name == "Mona Adel"
    assert result.customer.points == 700
    assert result.customer.log[0].invoice_id == result.voucher.code
    assert result.notification.message == "Issued a voucher worth 300 EGP."


@pytest.mark.asyncio
async def test_stale_snapshot_is_a_conflict(
    profile_service: CustomerProfileService,
    sample_customer: Customer,
    staff_member: StaffMember,
    store,
) -> None:
    """A second write from the same snapshot loses to the first."""
    first = await profile_service.grant_points(sample_customer, 10, "First", staff_member)
    second = await profile_service.grant_points(sample_customer, 20, "Second", staff_member)

    assert first.success
    assert not second.success
    assert second.error_code == "CONFLICT"
    assert second.notification.message == CONFLICT_MESSAGE
    assert store.customers["5001"].points == 1010


@pytest.mark.asyncio
async def test_conflict_from_store(
    profile_service: CustomerProfileService,
    sample_customer: Customer,
    staff_member: StaffMember,
    store,
) -> None:
    store.fail_with = ConflictError("5001", 3)

    result = await profile_service.deduct_points(sample_customer, 10, "Fix", staff_member)

    assert result.error_code == "CONFLICT"
    assert result.notification.message == CONFLICT_MESSAGE


@pytest.mark.asyncio
async def test_persistence_failure(
    profile_service: CustomerProfileService,
    sample_customer: Customer,
    staff_member: StaffMember,
    store,
    notifier: CollectingNotifier,
) -> None:
    """Save failures get a generic retry message and no voucher."""
    store.fail_with = PersistenceError("API_TIMEOUT")

    result = await profile_service.issue_voucher(sample_customer, 100, staff_member)

    assert not result.success
    assert result.error_code == "API_TIMEOUT"
    assert result.voucher is None
    assert notifier.notifications[0].message == SAVE_FAILED_MESSAGE


@pytest.mark.asyncio
async def test_record_impression(
    profile_service: CustomerProfileService,
    sample_customer: Customer,
    staff_member: StaffMember,
    store,
) -> None:
    result = await profile_service.record_impression(
        sample_customer,
        staff_member,
        product_quality_rating=5,
        branch_experience_rating=3,
        branch_id="branch-1",
        product_quality_notes="  Great fabric ",
        discovery_channel=DiscoveryChannel.FRIENDS,
        is_first_visit=True,
    )

    assert result.success
    assert result.notification.message == "Impression recorded."
    impression = result.customer.impressions[0]
    assert impression.product_quality_notes == "Great fabric"
    assert impression.recorded_by_user_id == "u-1"
    assert result.customer.points == 1000

    _, update, _ = store.updates[0]
    assert set(update.to_wire()) == {"impressions"}


@pytest.mark.asyncio
async def test_impression_needs_valid_ratings(
    profile_service: CustomerProfileService,
    sample_customer: Customer,
    staff_member: StaffMember,
) -> None:
    result = await profile_service.record_impression(
        sample_customer,
        staff_member,
        product_quality_rating=0,
        branch_experience_rating=3,
        branch_id="branch-1",
    )

    assert result.error_code == "INVALID_RATING"


def test_new_impression_requires_branch(staff_member: StaffMember) -> None:
    with pytest.raises(ValidationError) as exc:
        new_impression(
            staff_member,
            product_quality_rating=4,
            branch_experience_rating=4,
            branch_id="  ",
        )

    assert exc.value.code == "MISSING_BRANCH"


def test_new_impression_ids_are_unique(staff_member: StaffMember) -> None:
    kwargs = dict(
        product_quality_rating=4,
        branch_experience_rating=4,
        branch_id="b",
        now=datetime(2024, 1, 1),
    )

    assert new_impression(staff_member, **kwargs).id != new_impression(staff_member, **kwargs).id


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "reply",
    [
        httpx.Response(200, text="<html>proxy error</html>"),
        httpx.Response(200, json={"ok": True}),
    ],
)
async def test_unreadable_save_response_is_a_save_failure(
    sample_customer: Customer,
    staff_member: StaffMember,
    system_settings: SystemSettings,
    notifier: CollectingNotifier,
    reply: httpx.Response,
) -> None:
    """A store answering 2xx with a body that is not a customer gets the retry message."""

    def handler(request: httpx.Request) -> httpx.Response:
        return reply

    async with ConsoleApiClient(
        base_url="http://store.test/api", transport=httpx.MockTransport(handler)
    ) as client:
        service = CustomerProfileService(client, notifier, system_settings)
        result = await service.grant_points(sample_customer, 10, "Apology", staff_member)

    assert not result.success
    assert result.error_code == "API_BAD_RESPONSE"
    assert result.notification.message == SAVE_FAILED_MESSAGE
    assert notifier.notifications[0].severity == Severity.ERROR
