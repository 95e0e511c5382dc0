"""structlog configuration shared by the CLI and scripts."""

import logging
import sys

import structlog


def configure_logging(level: str = "INFO") -> None:
    """Configure structured logging on stderr, keeping stdout for rendered logs."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.dev.ConsoleRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
