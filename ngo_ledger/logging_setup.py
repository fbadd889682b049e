"""
Logging Configuration

DESIGN DECISION: Every module logs through structlog with event-style
names ("transaction_added", "persisted_row_skipped") and keyword fields.
This module configures structlog once, at application start.

Recovered faults (bad persisted rows, lookup misses, AI failures) are
logged at warning level. They are never surfaced as hard failures.
"""

import logging
import sys
from typing import Optional

import structlog

from ngo_ledger.config import get_settings

_CONFIGURED = False


def configure_logging(
    level: Optional[str] = None,
    json_output: Optional[bool] = None,
    force: bool = False,
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: Log level name; defaults to AppSettings.log_level
        json_output: JSON lines (True) or console rendering (False);
                     defaults to AppSettings.log_json
        force: Reconfigure even if already configured
    """
    global _CONFIGURED
    if _CONFIGURED and not force:
        return

    app_settings = get_settings().app
    level_name = (level or app_settings.log_level).upper()
    json_output = app_settings.log_json if json_output is None else json_output

    level_value = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level_value,
    )
    logging.getLogger().setLevel(level_value)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _CONFIGURED = True
