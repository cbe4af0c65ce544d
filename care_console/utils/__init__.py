"""Utility modules."""

from care_console.utils.logging import ActionLogger, get_logger, setup_logging

__all__ = ["ActionLogger", "get_logger", "setup_logging"]
