"""
Structured Logging

Every mutation of a collection and every storage problem is logged
as a structured event, so a broken store or an unexpected
recurrence can be traced after the fact.

The logger:
- Is configured once, on import
- Emits JSON lines with ISO timestamps
- Supports correlation IDs to tie together the events of one user action
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional
from uuid import UUID, uuid4

import structlog


structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through the stdlib root logger at `level`."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level, logging.INFO))


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a contribution).
    """
    return uuid4()


@contextmanager
def correlated(action: str, correlation_id: Optional[UUID] = None) -> Iterator[UUID]:
    """
    Bind an action name and correlation id to every log event
    emitted inside the block.
    """
    correlation_id = correlation_id or create_correlation_id()
    with structlog.contextvars.bound_contextvars(
        action=action,
        correlation_id=str(correlation_id),
    ):
        yield correlation_id
