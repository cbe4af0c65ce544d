"""Pytest configuration and fixtures."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from care_console.api.routes import get_store
from care_console.exceptions import ConflictError, ConsoleError, CustomerNotFoundError
from care_console.ledger.vouchers import VoucherCodeGenerator
from care_console.main import app
from care_console.models.customer import Customer, CustomerLogEntry, OrderStatus
from care_console.models.ledger import CustomerUpdate
from care_console.models.staff import StaffMember, UserRole
from care_console.models.system import SystemSettings
from care_console.services.notifications import CollectingNotifier
from care_console.services.profile import CustomerProfileService


class FakeCustomerStore:
    """In-memory data store with version checking, like the real one."""

    def __init__(self, *customers: Customer):
        self.customers = {customer.id: customer for customer in customers}
        self.updates: list[tuple[str, CustomerUpdate, str]] = []
        self.fail_with: ConsoleError | None = None

    async def get_customer(self, customer_id: str) -> Customer:
        if customer_id not in self.customers:
            raise CustomerNotFoundError(customer_id)
        return self.customers[customer_id]

    async def update_customer(
        self,
        customer_id: str,
        update: CustomerUpdate,
        *,
        expected_version: int,
        action_detail: str,
    ) -> Customer:
        if self.fail_with is not None:
            raise self.fail_with

        current = await self.get_customer(customer_id)
        if current.version != expected_version:
            raise ConflictError(customer_id, expected_version)

        fields = {name: getattr(update, name) for name in update.model_fields_set}
        saved = current.model_copy(update={**fields, "version": current.version + 1})

        self.customers[customer_id] = saved
        self.updates.append((customer_id, update, action_detail))
        return saved


# Sample data fixtures


@pytest.fixture
def issued_at() -> datetime:
    """A fixed issue timestamp."""
    return datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def empty_customer() -> Customer:
    """A freshly registered customer."""
    return Customer(id="5000", name="New Customer", phone="01000000000", governorate="Cairo")


@pytest.fixture
def sample_customer() -> Customer:
    """A customer with 1000 points and some history."""
    return Customer(
        id="5001",
        name="Mona Adel",
        phone="01001234567",
        governorate="Cairo",
        points=1000,
        total_points_earned=1200,
        total_points_used=200,
        total_purchases=Decimal("12000"),
        purchase_count=4,
        log=[
            CustomerLogEntry(
                invoice_id="INV-1002",
                date=datetime(2023, 12, 20, tzinfo=timezone.utc),
                details="Purchase INV-1002 for 7000",
                status=OrderStatus.DELIVERED,
                feedback=5,
                points_change=700,
                amount=Decimal("7000"),
            ),
            CustomerLogEntry(
                invoice_id="INV-1001",
                date=datetime(2023, 11, 2, tzinfo=timezone.utc),
                details="Purchase INV-1001 for 5000",
                status=OrderStatus.DELIVERED,
                feedback=None,
                points_change=500,
                amount=Decimal("5000"),
            ),
        ],
        version=3,
    )


@pytest.fixture
def staff_member() -> StaffMember:
    """A console user allowed to modify customers."""
    return StaffMember(id="u-1", name="Sara", role=UserRole.TEAM_LEADER)


@pytest.fixture
def moderator() -> StaffMember:
    """A read-only console user."""
    return StaffMember(id="u-2", name="Omar", role=UserRole.MODERATOR)


@pytest.fixture
def system_settings() -> SystemSettings:
    """One point is worth one pound."""
    return SystemSettings(point_value=Decimal("1"), currency="EGP")


@pytest.fixture
def store(sample_customer: Customer) -> FakeCustomerStore:
    """Data store holding the sample customer."""
    return FakeCustomerStore(sample_customer)


@pytest.fixture
def notifier() -> CollectingNotifier:
    """Notifier that keeps what it was given."""
    return CollectingNotifier()


@pytest.fixture
def profile_service(
    store: FakeCustomerStore,
    notifier: CollectingNotifier,
    system_settings: SystemSettings,
) -> CustomerProfileService:
    """Profile service wired to the fake store."""
    return CustomerProfileService(
        store,
        notifier,
        system_settings,
        codes=VoucherCodeGenerator(),
    )


@pytest_asyncio.fixture
async def test_client(store: FakeCustomerStore) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the app, backed by the fake store."""
    app.dependency_overrides[get_store] = lambda: store
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
