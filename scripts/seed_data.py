"""Seed demo customers into the data store."""

import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from care_console.api.client import ConsoleApiClient
from care_console.exceptions import PersistenceError
from care_console.ledger import grant, record_purchase
from care_console.models.customer import Customer, CustomerClassification, CustomerType


def build_sample_customers() -> list[Customer]:
    """Demo customers with a short purchase history each."""
    start = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)

    customers = [
        Customer(
            id="5001",
            name="Mona Adel",
            phone="01001234567",
            governorate="Cairo",
            join_date=start,
            source="Facebook",
        ),
        Customer(
            id="5002",
            name="Karim Youssef",
            phone="01101234567",
            governorate="Alexandria",
            join_date=start,
            classification=CustomerClassification.SILVER,
        ),
        Customer(
            id="5003",
            name="Nile Textiles",
            phone="01201234567",
            governorate="Giza",
            join_date=start,
            customer_type=CustomerType.CORPORATE,
        ),
    ]

    purchases = {
        "5001": [("INV-1001", "450.00", 45), ("INV-1007", "1200.00", 120)],
        "5002": [("INV-1002", "3200.00", 320)],
        "5003": [("INV-1003", "780.50", 78), ("INV-1011", "95.00", 9)],
    }

    seeded = []
    for customer in customers:
        for week, (invoice_id, amount, points) in enumerate(purchases[customer.id], 1):
            customer = record_purchase(
                customer,
                invoice_id,
                Decimal(amount),
                points,
                now=start + timedelta(weeks=week),
            ).customer
        seeded.append(customer)

    # Welcome bonus for the page customer
    seeded[0] = grant(seeded[0], 50, "Welcome bonus", now=start + timedelta(days=30)).customer
    return seeded


async def seed_sample_customers() -> None:
    """Create the demo customers through the REST client."""
    print("Seeding sample customers...")

    async with ConsoleApiClient() as client:
        for customer in build_sample_customers():
            try:
                await client.create_customer(customer)
            except PersistenceError as e:
                print(f"  ✗ {customer.name}: {e.message}")
                continue
            print(f"  ✓ Added {customer.name} (points: {customer.points})")

    print("✓ Sample customers seeded successfully\n")


async def main() -> None:
    """Run all seed functions."""
    print("\n" + "=" * 50)
    print("  Seeding Customer Care Console Data")
    print("=" * 50 + "\n")

    await seed_sample_customers()

    print("=" * 50)
    print("  ✓ All data seeded successfully!")
    print("=" * 50 + "\n")


if __name__ == "__main__":
    asyncio.run(main())
