"""Business settings supplied by the caller."""

from decimal import Decimal

from pydantic import Field

from care_console.models.base import Money, WireModel


class ClassificationThresholds(WireModel):
    """Spend thresholds for the external classification policy."""

    silver: Money = Decimal("1000")
    gold: Money = Decimal("5000")
    platinum: Money = Decimal("10000")


class SystemSettings(WireModel):
    """Organisation-wide settings relevant to loyalty."""

    point_value: Money = Field(default=Decimal("1"), gt=0)
    currency: str = "EGP"
    import_spend: Money = Decimal("0")
    import_points: int = 0
    classification: ClassificationThresholds = Field(default_factory=ClassificationThresholds)
