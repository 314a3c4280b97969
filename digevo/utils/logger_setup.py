"""
loguru sinks for digevo runs.

A console sink for lifecycle messages and, when a log directory is given, a
rotating file sink that also keeps the per-update scheduler detail.
"""

from datetime import datetime, timezone
from pathlib import Path
import sys

from loguru import logger

_PLAIN_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"
_COLOR_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<blue>{function}</blue>:<yellow>{line}</yellow> | "
    "<level>{message}</level>"
)


def setup_logger(
    log_dir: str | Path | None = "logs",
    level: str = "INFO",
    file_level: str | None = None,
    run_name: str = "simulation",
    rotation: str = "50 MB",
    retention: str = "30 days",
    enable_colors: bool = True,
) -> Path | None:
    """
    Replace loguru's handlers with a console sink and an optional file sink.

    Args:
        log_dir: Directory for log files; ``None`` logs to the console only
        level: Console level (TRACE, DEBUG, INFO, WARNING, ERROR)
        file_level: File level, defaults to ``level``
        run_name: Prefix of the log file name
        rotation: Log rotation policy (e.g., "50 MB", "1 day")
        retention: Log retention policy (e.g., "30 days", "1 month")
        enable_colors: Colorize the console when it is a terminal

    Returns:
        Path to the log file, or ``None`` without a log directory
    """
    logger.remove()

    colorize = enable_colors and sys.stdout.isatty()
    logger.add(
        sys.stdout,
        level=level,
        format=_COLOR_FORMAT if colorize else _PLAIN_FORMAT,
        colorize=colorize,
        backtrace=True,
        diagnose=True,
    )

    if log_dir is None:
        logger.debug("Console logging at {}", level)
        return None

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"{run_name}_{timestamp}.log"

    logger.add(
        log_file,
        level=file_level or level,
        format=_PLAIN_FORMAT,
        rotation=rotation,
        retention=retention,
        compression="zip",
        encoding="utf-8",
        backtrace=True,
        diagnose=True,
    )

    logger.info("Logging to console ({}) and {} ({})", level, log_file, file_level or level)
    return log_file
