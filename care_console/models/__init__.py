"""Data models for the customer care console."""

from care_console.models.customer import (
    Customer,
    CustomerClassification,
    CustomerImpression,
    CustomerLogEntry,
    CustomerType,
    DiscoveryChannel,
    OrderStatus,
)
from care_console.models.ledger import CustomerUpdate, LedgerResult, VoucherIssuance
from care_console.models.staff import StaffMember, UserRole
from care_console.models.system import ClassificationThresholds, SystemSettings
from care_console.models.voucher import Voucher

__all__ = [
    # Customer
    "Customer",
    "CustomerClassification",
    "CustomerImpression",
    "CustomerLogEntry",
    "CustomerType",
    "DiscoveryChannel",
    "OrderStatus",
    # Ledger
    "CustomerUpdate",
    "LedgerResult",
    "VoucherIssuance",
    "Voucher",
    # Staff
    "StaffMember",
    "UserRole",
    # Settings
    "ClassificationThresholds",
    "SystemSettings",
]
