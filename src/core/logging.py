"""Structured logging configuration using structlog.

Estimates are computed from personal income data, so log events carry
correlation fields (request id, tax year) and counts, never amounts. Any
money-like key that reaches a log call is masked by _redact_amounts before
rendering.
"""

import logging
import sys
from contextvars import ContextVar
from decimal import Decimal
from typing import Any

import orjson
import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from src.core.config import settings

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
tax_year_ctx: ContextVar[int | None] = ContextVar("tax_year", default=None)

REDACTED = "[redacted]"

# Keys whose values are personal money amounts
AMOUNT_KEYS = frozenset(
    {
        "taxable_income",
        "income_tax_withheld",
        "withheld_total",
        "taxable_income_total",
        "refund_estimate",
        "underpayment_estimate",
        "liability",
        "donations_46_total",
    }
)


def _add_request_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Attach request id and tax year when they are bound."""
    if request_id := request_id_ctx.get():
        event_dict.setdefault("request_id", request_id)
    if (tax_year := tax_year_ctx.get()) is not None:
        event_dict.setdefault("tax_year", tax_year)
    return event_dict


def _redact_amounts(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Mask personal money amounts that were passed to a log call."""
    for key in AMOUNT_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def _default(obj: Any) -> Any:
    if isinstance(obj, Decimal):
        return str(obj)
    raise TypeError(f"Type is not JSON serializable: {type(obj).__name__}")


def _orjson_serializer(obj: Any, **kwargs: Any) -> str:
    """Serialize a log event with orjson, rendering Decimal as a string."""
    return orjson.dumps(obj, default=_default).decode("utf-8")


def _use_json() -> bool:
    log_format = settings.log_format.lower() if settings.log_format else None
    if log_format is not None:
        return log_format == "json"
    return settings.environment != "development"


def configure_logging() -> None:
    """Configure structlog for the application.

    Console rendering in development, orjson-backed JSON elsewhere or when
    LOG_FORMAT=json.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _add_request_context,
        _redact_amounts,
    ]

    if _use_json():
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.EventRenamer("message"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(serializer=_orjson_serializer),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if settings.debug else logging.INFO,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a configured structlog logger.

    Args:
        name: Optional logger name, usually the caller's __name__.

    Returns:
        Configured structlog bound logger.
    """
    return structlog.get_logger(name)
