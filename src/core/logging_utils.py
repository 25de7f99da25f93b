"""
Logging utilities for the load bootstrap framework.
"""
import logging
import sys
import time
from pathlib import Path
from datetime import datetime
from typing import Optional, Dict, Any, Iterable

LOGGER_NAME = 'load_bootstrap'
LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Third-party loggers that flood DEBUG output
NOISY_LOGGERS = ('matplotlib', 'PIL', 'joblib')


def setup_logging(
    log_dir: Optional[Path] = None,
    run_id: Optional[str] = None,
    level: int = logging.INFO,
    console: bool = True,
    quiet: Iterable[str] = NOISY_LOGGERS
) -> logging.Logger:
    """
    Set up the framework logger.

    Args:
        log_dir: Directory for log files (no file handler if None)
        run_id: Run identifier used to name the log file
        level: Logging level
        console: Whether to log to stdout
        quiet: Names of third-party loggers capped at WARNING

    Returns:
        Configured logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers = []

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        if run_id is None:
            run_id = datetime.now().strftime("%Y%m%d_%H%M%S")

        log_file = log_dir / f"{run_id}.log"
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        logger.info(f"Logging to: {log_file}")

    for name in quiet:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get the framework logger, or one of its children."""
    if name is None:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def log_parameters(logger: logging.Logger, params: Dict[str, Any], title: str = "Parameters"):
    """Log a flat parameter mapping, one key per line."""
    logger.info(f"{title}:")
    width = max((len(str(k)) for k in params), default=0)
    for key, value in params.items():
        logger.info(f"  {str(key):<{width}} = {value}")


class LogContext:
    """Context manager for logging sections."""

    def __init__(self, logger: logging.Logger, section: str):
        self.logger = logger
        self.section = section
        self.start_time = None

    @property
    def elapsed(self) -> float:
        if self.start_time is None:
            return 0.0
        return time.perf_counter() - self.start_time

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.info("-" * 40)
        self.logger.info(f"Starting: {self.section}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.logger.info(f"Completed: {self.section} ({self.elapsed:.2f}s)")
        else:
            self.logger.error(f"Failed: {self.section} after {self.elapsed:.2f}s - {exc_type.__name__}: {exc_val}")
        return False
