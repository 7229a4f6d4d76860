"""
Centralized logging infrastructure for the steering network project.

Usage:
    from anndrive.utils.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Training started")
    logger.debug("Alpha: 0.011")
    logger.warning("Checkpoint rejected")

Configuration:
    Set LOG_LEVEL in config.py to control verbosity:
    - DEBUG: Every epoch, including rejected ones
    - INFO: Periodic progress and model events (default)
    - WARNING: Warnings and errors only
    - ERROR: Errors only
"""

import logging
import sys
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional


ROOT_LOGGER_NAME = 'anndrive'


class LogLevel(Enum):
    """Log levels for configuration."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


# Module-level state
_initialized = False
_auto_configured = False
_log_dir: Optional[Path] = None
_file_handler: Optional[logging.FileHandler] = None


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors to console output."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m',
    }

    def __init__(self, fmt: str, use_colors: bool = True):
        super().__init__(fmt)
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        if self.use_colors:
            color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{color}{record.levelname}{self.COLORS['RESET']}"
        return super().format(record)


def setup_logging(
    log_dir: str = 'logs',
    level: LogLevel = LogLevel.INFO,
    console_output: bool = True,
    file_output: bool = True,
    log_filename: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Initialize the logging system.

    Args:
        log_dir: Directory for log files
        level: Minimum log level to capture
        console_output: Whether to output to console
        file_output: Whether to output to file
        log_filename: Custom log filename (default: training_YYYYMMDD_HHMMSS.log)
        force: Reconfigure even if logging was already set up
    """
    global _initialized, _log_dir, _file_handler

    if _initialized and not force:
        return

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level.value)
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers.clear()
    _file_handler = None

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level.value)
        console_fmt = ColoredFormatter(
            '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            use_colors=True
        )
        console_handler.setFormatter(console_fmt)
        root_logger.addHandler(console_handler)

    # File handler without colors
    if file_output:
        _log_dir = Path(log_dir)
        _log_dir.mkdir(parents=True, exist_ok=True)
        if log_filename is None:
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            log_filename = f'training_{timestamp}.log'

        log_path = _log_dir / log_filename
        _file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
        _file_handler.setLevel(logging.DEBUG)  # Capture everything in file
        file_fmt = logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
        )
        _file_handler.setFormatter(file_fmt)
        root_logger.addHandler(_file_handler)

    if not root_logger.handlers:
        root_logger.addHandler(logging.NullHandler())

    _initialized = True
    root_logger.debug(f"Logging initialized (level={level.name}, file={file_output})")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance configured with project settings

    Example:
        logger = get_logger(__name__)
        logger.info("Message")
    """
    global _initialized, _auto_configured

    # Console-only defaults until the application calls setup_logging()
    if not _initialized and not _auto_configured:
        setup_logging(file_output=False)
        _initialized = False
        _auto_configured = True

    # Strip the package prefix for cleaner names
    prefix = f'{ROOT_LOGGER_NAME}.'
    if name.startswith(prefix):
        name = name[len(prefix):]

    return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')


def get_log_path() -> Optional[Path]:
    """Get the current log file path."""
    if _file_handler is not None:
        return Path(_file_handler.baseFilename)
    return None


def log_epoch_metrics(
    epoch: int,
    sse: float,
    alpha: float,
    accepted: bool,
    progress: Optional[float] = None,
    samples: Optional[int] = None,
) -> None:
    """
    Log per-epoch training metrics in a consistent format.

    Args:
        epoch: Epoch number (1-based)
        sse: Normalized squared error of the epoch
        alpha: Learning rate after the epoch's adjustment
        accepted: Whether the epoch's weight changes were kept
        progress: Fraction of the epoch budget consumed (if available)
        samples: Number of samples trained on (if available)
    """
    logger = get_logger('training')

    metrics = [
        f"epoch={epoch}",
        f"sse={sse:.6f}",
        f"alpha={alpha:.4f}",
        "accepted" if accepted else "rolled_back",
    ]

    if progress is not None:
        metrics.append(f"progress={progress * 100:.1f}%")
    if samples is not None:
        metrics.append(f"samples={samples}")

    logger.info(" | ".join(metrics))


def log_model_event(event: str, path: str, **kwargs) -> None:
    """
    Log model-related events (save/load).

    Args:
        event: Event type ('save', 'load', 'skip')
        path: Weights file path
        **kwargs: Additional context (e.g., epoch, sse)
    """
    logger = get_logger('model')

    extra = " | ".join(f"{k}={v}" for k, v in kwargs.items())
    if extra:
        logger.info(f"{event.upper()} | {path} | {extra}")
    else:
        logger.info(f"{event.upper()} | {path}")
