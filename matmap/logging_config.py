"""
Logging Configuration
Sets up the logger namespace shared by all converters.
"""
import logging
import sys
from typing import Optional

LOGGER_NAMESPACE = "matmap"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the 'matmap' logger.

    Args:
        level: Logging level (e.g. logging.DEBUG for the full a2j/j2a trace)
        log_file: Optional path to also save logs to a file.

    Returns:
        The configured namespace logger.
    """
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(level)

    # Avoid duplicate handlers when called more than once
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_converter_logger(name: str) -> logging.Logger:
    """Logger of one named converter, a child of the 'matmap' namespace."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")
