"""Structured logging package."""

from savings_tracker.logs.logger import (
    configure_logging,
    correlated,
    create_correlation_id,
    get_logger,
)

__all__ = ["configure_logging", "correlated", "create_correlation_id", "get_logger"]
