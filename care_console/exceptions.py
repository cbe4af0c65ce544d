"""Console exceptions.

Every error carries a machine-readable ``code`` plus keyword context, so the
action layer can turn it into a notification without string matching:

    try:
        result = deduct(customer, 50, "Manual correction")
    except InsufficientBalanceError as e:
        print(e.code, e.context["available"])
"""

from typing import Any


class ConsoleError(Exception):
    """Base class for errors raised by the console."""

    _default_messages: dict[str, str] = {
        "INVALID_AMOUNT": "Points must be a positive number",
        "MISSING_REASON": "A reason is required",
        "INVALID_POINT_VALUE": "Point value must be positive",
        "INVALID_RATING": "Ratings must be between 1 and 5",
        "MISSING_BRANCH": "A branch must be selected",
        "MISSING_INVOICE": "An invoice id is required",
        "INSUFFICIENT_POINTS": "Insufficient points",
        "INVALID_REDEMPTION": "Invalid or insufficient points for redemption",
        "ACTION_NOT_PERMITTED": "You are not allowed to perform this action",
        "CUSTOMER_NOT_FOUND": "Customer not found",
        "API_TIMEOUT": "The data store did not answer in time",
        "API_UNREACHABLE": "Could not connect to the data store",
        "API_ERROR": "The data store rejected the request",
        "API_BAD_RESPONSE": "The data store sent a response that could not be read",
        "CONFLICT": "The customer was modified by someone else",
    }

    def __init__(self, code: str, message: str | None = None, **context: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.context = context
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def as_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, **self.context}


class ValidationError(ConsoleError):
    """Missing or out-of-range input. Nothing was changed."""


class InsufficientBalanceError(ConsoleError):
    """A deduction exceeds the customer's current balance."""

    def __init__(self, available: int, requested: int):
        super().__init__(
            "INSUFFICIENT_POINTS",
            available=available,
            requested=requested,
        )


class InvalidRedemptionError(ConsoleError):
    """A voucher request for zero points or more points than available."""

    def __init__(self, available: int, requested: int):
        super().__init__(
            "INVALID_REDEMPTION",
            available=available,
            requested=requested,
        )


class ActionNotPermittedError(ConsoleError):
    """The acting staff member's role may not modify customers."""


class PersistenceError(ConsoleError):
    """The data store failed or refused to save."""


class CustomerNotFoundError(PersistenceError):
    """The data store has no customer with the requested id."""

    def __init__(self, customer_id: str):
        super().__init__("CUSTOMER_NOT_FOUND", customer_id=customer_id)


class ConflictError(ConsoleError):
    """The stored version no longer matches the snapshot the update was built from."""

    def __init__(self, customer_id: str, expected_version: int, message: str | None = None):
        super().__init__(
            "CONFLICT",
            message,
            customer_id=customer_id,
            expected_version=expected_version,
        )
