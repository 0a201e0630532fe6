"""Logging configuration for the catalog scraper."""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FILE_NAME = "scraper.log"
ERROR_LOG_FILE_NAME = "scraper-error.log"


def setup_logging(
    level: str = "INFO",
    log_dir: Optional[str] = None,
    format_string: Optional[str] = None
) -> None:
    """Configure logging for the scraper.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Optional directory for scraper.log and scraper-error.log
        format_string: Optional custom format string
    """
    if format_string is None:
        format_string = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    # Get numeric level
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    # Create handlers
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_dir:
        # Create log directory if needed
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        handlers.append(logging.FileHandler(log_path / LOG_FILE_NAME))

        error_handler = logging.FileHandler(log_path / ERROR_LOG_FILE_NAME)
        error_handler.setLevel(logging.ERROR)
        handlers.append(error_handler)

    # Configure root logger
    logging.basicConfig(
        level=numeric_level,
        format=format_string,
        handlers=handlers,
        force=True  # Override any existing configuration
    )

    # Set levels for noisy third-party libraries
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)
    logging.getLogger('playwright').setLevel(logging.WARNING)

