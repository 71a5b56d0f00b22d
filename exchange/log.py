"""structlog setup for command-line entry points."""

import logging
import sys

import structlog


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog with console output at the given level.

    Library modules only call ``structlog.get_logger()``; configuration is
    left to entry points such as the CLI.
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level}")

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        # Resolve stderr per logger so redirected streams are honored
        logger_factory=lambda *_args: structlog.PrintLogger(file=sys.stderr),
    )
