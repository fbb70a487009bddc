"""
Structlog setup for the launchpad service.

Wei amounts routinely exceed 2**53, so large ints and Decimals are rendered
as strings before they reach the JSON renderer.
"""

import logging
import sys
from decimal import Decimal
from typing import Any, MutableMapping, Optional

import structlog

from .config import settings


# Largest integer a JSON consumer can hold exactly as a double
_JSON_SAFE_INT = 2**53


def stringify_amounts(_logger: Any, _method: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Render Decimals and oversized ints as strings."""
    for key, value in event_dict.items():
        if isinstance(value, bool):
            continue
        if isinstance(value, Decimal) or (isinstance(value, int) and abs(value) >= _JSON_SAFE_INT):
            event_dict[key] = str(value)
    return event_dict


def _use_console(level: int, log_format: str) -> bool:
    if log_format == "console":
        return True
    if log_format == "json":
        return False
    return level == logging.DEBUG


def setup_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Configure structlog and send stdlib records through the same pipeline.

    Args:
        log_level: Override for settings.log_level
        log_format: "console", "json" or "auto" (console only at DEBUG)
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    console = _use_console(level, (log_format or settings.log_format).lower())

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        stringify_amounts,
    ]
    if console:
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    else:
        processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=processors,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    ))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    # RequestLoggingMiddleware already logs every request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    for name in ("httpcore", "httpx"):
        logging.getLogger(name).setLevel(logging.WARNING)
