import sys

import structlog
from structlog.typing import Processor

# Map string level to integer
LEVEL_MAP = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
}


def configure_logging(log_level: str = "INFO", log_format: str = "console") -> None:
    """Configure structlog for the whole process.

    Args:
        log_level: Minimum level name (DEBUG, INFO, WARNING, ERROR)
        log_format: "console" for color-coded lines, "json" for one JSON object per line
    """
    renderer: Processor
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(LEVEL_MAP.get(log_level, 20)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,  # Disable cache to allow level updates
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name

    Returns:
        Logger bound to the current structlog configuration
    """
    return structlog.get_logger(name)
