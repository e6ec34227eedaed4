"""
Logging setup using Loguru.
"""

import sys
from pathlib import Path

from loguru import logger

from .config import LoggingConfig


def setup_loguru(
    log_file: Path,
    level: str = "INFO",
    max_file_size_mb: int = 10,
    backup_count: int = 5,
    console_output: bool = False,
) -> None:
    """
    Configure loguru with a rotating file sink and optional console sink.

    Args:
        log_file: Path to log file
        level: Minimum level for logging (DEBUG, INFO, WARNING, ERROR)
        max_file_size_mb: Rotate the file when it reaches this size
        backup_count: Number of rotated files to keep
        console_output: Also log to stderr
    """
    # Remove default handler
    logger.remove()

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        rotation=f"{max_file_size_mb} MB",
        retention=backup_count,
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}",
        enqueue=False,  # Synchronous writes (thread-safe but blocking)
    )

    if console_output:
        logger.add(sys.stderr, level=level, format="{level: <8} | {message}")

    logger.info(f"Loguru initialized: {log_file} (level={level})")


def setup_logging(config: LoggingConfig, log_file: Path) -> None:
    """Configure loguru from a LoggingConfig."""
    setup_loguru(
        log_file,
        level=config.level,
        max_file_size_mb=config.max_file_size_mb,
        backup_count=config.backup_count,
        console_output=config.console_output,
    )
