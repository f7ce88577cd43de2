"""Logging configuration for network-cmdref.

Provides configurable logging with:
- File-based logging with rotation
- Console output for real-time debugging
- Performance timing helpers for catalog construction

Environment Variables:
    CMDREF_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    CMDREF_LOG_FILE: Path to log file (default: ~/.network-cmdref/cmdref.log)
    CMDREF_LOG_MAX_SIZE: Max log file size in MB (default: 10)
    CMDREF_LOG_BACKUPS: Number of backup files to keep (default: 5)

Usage:
    from network_cmdref.utils.logging_config import setup_logging, timed_section

    setup_logging()  # Call once at startup

    with timed_section("cmd_ref_build", product="N9K-C9396PX"):
        ...
"""
import functools
import logging
import os
import time
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Optional

# Performance logger - separate from main logger for easy filtering
perf_logger = logging.getLogger("cmdref.perf")


def get_log_level() -> int:
    """Get log level from environment."""
    level_str = os.environ.get("CMDREF_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_str, logging.INFO)


def get_log_file() -> Path:
    """Get log file path from environment."""
    default_path = Path.home() / ".network-cmdref" / "cmdref.log"
    path_str = os.environ.get("CMDREF_LOG_FILE", str(default_path))
    return Path(path_str)


def setup_logging(log_file: Optional[Path] = None) -> None:
    """Configure logging for the application.

    Sets up:
    - Console handler (INFO+ by default, respects CMDREF_LOG_LEVEL)
    - File handler with rotation (DEBUG level - captures everything)
    - Performance logger for timing metrics

    Args:
        log_file: Overrides CMDREF_LOG_FILE
    """
    log_level = get_log_level()
    log_file = log_file or get_log_file()
    max_size_mb = int(os.environ.get("CMDREF_LOG_MAX_SIZE", "10"))
    backup_count = int(os.environ.get("CMDREF_LOG_BACKUPS", "5"))

    log_file.parent.mkdir(parents=True, exist_ok=True)

    main_format = logging.Formatter(
        "%(asctime)s.%(msecs)03d | %(name)-40s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(main_format)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(main_format)

    package_logger = logging.getLogger("network_cmdref")
    package_logger.setLevel(logging.DEBUG)  # Capture all, handlers filter
    package_logger.addHandler(console_handler)
    package_logger.addHandler(file_handler)

    perf_logger.setLevel(logging.DEBUG)
    perf_logger.addHandler(console_handler)
    perf_logger.addHandler(file_handler)

    package_logger.info(
        f"Logging initialized: level={logging.getLevelName(log_level)}, file={log_file}"
    )


def timed(operation: str) -> Callable:
    """Decorator to log execution time of a function.

    Usage:
        @timed("load_document")
        def load_document(path):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
                elapsed = (time.perf_counter() - start) * 1000
                perf_logger.info(f"{operation:20s} | {elapsed:8.2f}ms | OK")
                return result
            except Exception as e:
                elapsed = (time.perf_counter() - start) * 1000
                perf_logger.warning(f"{operation:20s} | {elapsed:8.2f}ms | FAIL: {e}")
                raise

        return wrapper

    return decorator


@contextmanager
def timed_section(operation: str, **extra):
    """Context manager for timing code sections.

    Args:
        operation: Name of the operation
        **extra: Additional context to log
    """
    start = time.perf_counter()
    extra_str = " | ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""

    try:
        yield
        elapsed = (time.perf_counter() - start) * 1000
        msg = f"{operation:20s} | {elapsed:8.2f}ms | OK"
        if extra_str:
            msg += f" | {extra_str}"
        perf_logger.info(msg)
    except Exception as e:
        elapsed = (time.perf_counter() - start) * 1000
        msg = f"{operation:20s} | {elapsed:8.2f}ms | FAIL: {e}"
        if extra_str:
            msg += f" | {extra_str}"
        perf_logger.warning(msg)
        raise
