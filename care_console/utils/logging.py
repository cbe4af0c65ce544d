"""Structured logging configuration."""

import logging
import sys
from typing import Any

import structlog
from pythonjsonlogger import jsonlogger

from care_console.config import get_settings


def setup_logging() -> None:
    """Configure structured logging for the application."""
    settings = get_settings()

    # Configure standard library logging
    log_level = getattr(logging, settings.log_level)

    if settings.log_format == "json":
        # JSON logging for production
        handler = logging.StreamHandler(sys.stdout)
        formatter = jsonlogger.JsonFormatter(
            fmt="%(timestamp)s %(level)s %(name)s %(message)s",
            rename_fields={"levelname": "level", "asctime": "timestamp"},
        )
        handler.setFormatter(formatter)
    else:
        # Human-readable logging for development
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer() if settings.log_format == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


class ActionLogger:
    """Audit logger for staff actions on a customer profile."""

    def __init__(self, component: str):
        self.component = component
        self.logger = get_logger(component)

    def log_action(
        self,
        action: str,
        customer_id: str,
        performed_by: str,
        detail: str,
        **kwargs: Any,
    ) -> None:
        """Log an accepted and persisted action."""
        self.logger.info(
            "customer_action",
            component=self.component,
            action=action,
            customer_id=customer_id,
            performed_by=performed_by,
            detail=detail,
            **kwargs,
        )

    def log_rejection(
        self,
        action: str,
        customer_id: str,
        code: str,
        **kwargs: Any,
    ) -> None:
        """Log an action refused before anything was persisted."""
        self.logger.info(
            "action_rejected",
            component=self.component,
            action=action,
            customer_id=customer_id,
            code=code,
            **kwargs,
        )

    def log_persistence_failure(
        self,
        action: str,
        customer_id: str,
        error: str,
        **kwargs: Any,
    ) -> None:
        """Log a save the data store did not accept."""
        self.logger.warning(
            "persistence_failed",
            component=self.component,
            action=action,
            customer_id=customer_id,
            error=error,
            **kwargs,
        )
