"""Customer care console: loyalty ledger, vouchers and customer history."""

__version__ = "0.1.0"
