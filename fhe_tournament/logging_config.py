"""
Logging configuration for the FHE tournament core.

Sets up loguru with appropriate levels and formatting.
"""

import sys

from loguru import logger
from typing import Any


def setup_logging(
    level: str = "INFO", debug: bool = False, log_file: str | None = "fhe_tournament.log"
) -> None:
    """
    Configure loguru logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        debug: If True, log DEBUG and above to stderr regardless of level
        log_file: File receiving INFO and above, or None to log to stderr only
    """
    # Remove default handler
    logger.remove()

    log_level = "DEBUG" if debug else level

    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[component]}:{function}:{line}</cyan> - <level>{message}</level>",
    )

    if log_file is None:
        return

    # Verification and rejection events are kept on disk
    logger.add(
        log_file,
        level="INFO",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[component]}:{function}:{line} - {message}",
        rotation="10 MB",
        retention="7 days",
        compression="zip",
    )


# Records logged through the bare logger still render {extra[component]}
logger.configure(extra={"component": "fhe_tournament"})


def get_logger(name: str | None = None) -> Any:
    """
    Get a logger instance.

    Args:
        name: Optional component name bound into every record

    Returns:
        Logger instance
    """
    if name:
        return logger.bind(component=name)
    return logger
