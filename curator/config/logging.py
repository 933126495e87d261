"""Logging configuration and utilities using Loguru.

Public API:
----------
setup_loguru_logger(verbose: bool = False) -> None
    Configure console and file sinks once at startup

get_logger(name: str) -> Logger
    Get a context-aware logger for your module
    Usage: logger = get_logger(__name__)

@resilient_operation(operation_name: str)
    Decorator for logging and re-raising errors from external calls

Quick Start:
-----------
```python
from curator.config import get_logger
logger = get_logger(__name__)
logger.info("Replacing playlist tracks", playlist_id=playlist_id)
```
"""

import functools
from pathlib import Path
import sys
from typing import Any

from loguru import logger

from .settings import settings

# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================


def setup_loguru_logger(verbose: bool = False) -> None:
    """Configure Loguru logger for the application.

    Args:
        verbose: Enable debug level console output and detailed tracebacks
    """
    logger.remove()

    log_file_path = Path(settings.logging.log_file)
    log_file_path.parent.mkdir(parents=True, exist_ok=True)

    logger.configure(extra={"service": "curator", "module": "root"})

    console_level = "DEBUG" if verbose else settings.logging.console_level
    logger.add(
        sink=sys.stderr,
        level=console_level,
        format=(
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:"
            "<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
        backtrace=verbose,
        diagnose=verbose,
    )

    logger.add(
        sink=str(log_file_path),
        level=settings.logging.file_level,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra[service]} | {extra[module]} | {name}:{function}:{line} | {message}",
        rotation="10 MB",
        retention="1 week",
        compression="zip",
        backtrace=True,
        diagnose=False,  # locals may hold access tokens
        enqueue=not settings.logging.real_time_debug,
        catch=True,
        serialize=True,
    )


# =============================================================================
# LOGGER FACTORY
# =============================================================================


def get_logger(name: str) -> Any:  # Use Any for Loguru logger type
    """Get a pre-configured logger instance for the given module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Loguru logger bound with module and service context
    """
    return logger.bind(
        module=name,
        service="curator",
    )


# =============================================================================
# ERROR HANDLING DECORATORS
# =============================================================================


def resilient_operation(operation_name=None):
    """Decorator for service boundary operations with standardized error logging.

    The wrapped coroutine's exception is logged with its traceback and re-raised
    unchanged, so callers keep full control of the failure.

    Example:
        >>> @resilient_operation("spotify_add_tracks")
        >>> async def add_tracks(self, credentials, playlist_id, uris):
        >>>     ...
    """

    def decorator(func):
        op_name = operation_name or func.__name__

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                logger.opt(exception=e).error(f"Error in {op_name}: {e!s}")
                raise

        return wrapper

    return decorator
