"""
structlog setup for the CLI and recompute runs.

Library modules log through the standard ``logging`` module with %-style
arguments; ``setup_logging`` routes those records to stdout and configures
structlog for the bound-context lines (``run_id``, ``scope``) emitted by the
CLI. Production renders JSON lines, every other environment a console view.
"""

import logging
import sys

import structlog
from structlog.types import Processor

from artisan_rank.config.settings import get_settings


def setup_logging(level: str | None = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: Log level override (e.g. ``DEBUG`` from ``--debug``);
            defaults to ``settings.log_level``.
    """
    settings = get_settings()
    level_name = (level or settings.log_level).upper()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if settings.is_production:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level_name)),
        logger_factory=structlog.PrintLoggerFactory(sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
        level=level_name,
    )
    # Quiet the driver; pool lifecycle is logged by Database itself
    logging.getLogger("asyncpg").setLevel(logging.WARNING)


def bind_context(**kwargs) -> None:
    """Bind fields (e.g. ``run_id``, ``scope``) to every later structlog line."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop all bound context fields."""
    structlog.contextvars.clear_contextvars()
