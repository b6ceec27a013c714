"""Logging configuration."""
import logging
import sys
from typing import Optional

LOGGER_NAME = "utgen"


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Setup application logging."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if not logger.handlers:
        # Console handler
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)

        # Format
        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] [%(name)s] %(message)s',
            datefmt='%I:%M:%S %p'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    else:
        for handler in logger.handlers:
            handler.setLevel(level)
    return logger


def log_command(command: str, returncode: int, duration_s: float):
    """Log an external command execution."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.info(f"'{command}' exited with {returncode} in {duration_s:.1f}s")


def log_info(message: str, source: str = "app"):
    """Log info message."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.info(f"[{source}] {message}")


def log_error(message: str, source: str = "app", exc: Optional[Exception] = None):
    """Log error message."""
    logger = logging.getLogger(LOGGER_NAME)
    if exc:
        logger.error(f"[{source}] {message}: {str(exc)}", exc_info=True)
    else:
        logger.error(f"[{source}] {message}")


def log_warning(message: str, source: str = "app"):
    """Log warning message."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.warning(f"[{source}] {message}")


def log_debug(message: str, source: str = "app"):
    """Log debug message."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.debug(f"[{source}] {message}")
