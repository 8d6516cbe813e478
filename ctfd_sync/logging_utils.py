"""Logging utilities with dated local log files and retention cleanup."""
import logging
import threading
from typing import Optional
from datetime import datetime, date, timedelta
import os
import re

from .config import DEFAULT_CONFIG

LOGGER_NAME = "ctfd_sync"

# Global logger instance
logger = None
logger_lock = threading.Lock()

_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
_DATEFMT = '%Y-%m-%d %H:%M:%S'


def setup_logger(
    log_file: Optional[str] = None,
    level: Optional[str] = None,
    retention_days: Optional[int] = None,
) -> logging.Logger:
    """
    Set up the sync logger with a dated daily file and console output.

    Args:
        log_file: Base path of the log file. If None, uses the default from
            DEFAULT_CONFIG. An empty string disables file logging.
        level: Level name such as "INFO" or "DEBUG".
        retention_days: Dated files older than this are removed.

    Returns:
        Configured logger instance.
    """
    global logger

    if logger is not None:
        return logger

    with logger_lock:
        if logger is not None:  # Double-check after acquiring lock
            return logger

        if log_file is None:
            log_file = DEFAULT_CONFIG["LOG_FILE"]
        if retention_days is None:
            retention_days = DEFAULT_CONFIG["LOG_RETENTION_DAYS"]

        new_logger = logging.getLogger(LOGGER_NAME)

        level_name = str(level or DEFAULT_CONFIG["LOG_LEVEL"]).upper()
        new_logger.setLevel(getattr(logging, level_name, logging.INFO))
        new_logger.propagate = False

        # Drop handlers left on the named logger by an earlier setup or a test runner
        _remove_handlers(new_logger)

        formatter = logging.Formatter(_FORMAT, datefmt=_DATEFMT)

        if log_file:
            handler = DailyNamedFileHandler(log_file, retention_days)
            handler.setFormatter(formatter)
            new_logger.addHandler(handler)

        # Also log to console
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        new_logger.addHandler(console_handler)

        logger = new_logger

        if log_file:
            cleanup_old_logs(log_file, retention_days)

        return logger


def setup_logger_from_config(config) -> logging.Logger:
    """Set up the logger using LOG_FILE, LOG_LEVEL and LOG_RETENTION_DAYS from config."""
    return setup_logger(
        log_file=config.get("LOG_FILE", DEFAULT_CONFIG["LOG_FILE"]),
        level=config.get("LOG_LEVEL", DEFAULT_CONFIG["LOG_LEVEL"]),
        retention_days=int(config.get("LOG_RETENTION_DAYS", DEFAULT_CONFIG["LOG_RETENTION_DAYS"])),
    )


def get_logger() -> logging.Logger:
    """Get the global logger instance, initializing if necessary."""
    global logger
    if logger is None:
        return setup_logger()
    return logger


def _parse_log_base(log_file: str):
    log_dir = os.path.dirname(log_file) or "."
    base = os.path.basename(log_file)
    base_name, ext = os.path.splitext(base)
    ext = ext or ".log"
    return log_dir, base_name, ext


def _get_dated_log_path(log_file: str, for_date: date) -> str:
    log_dir, base_name, ext = _parse_log_base(log_file)
    return os.path.join(log_dir, f"{base_name}-{for_date:%Y-%m-%d}{ext}")


def cleanup_old_logs(log_file: str, retention_days: int) -> int:
    """Remove dated log files older than retention_days. Returns the number removed."""
    log_dir, base_name, ext = _parse_log_base(log_file)

    if not os.path.exists(log_dir):
        return 0

    pattern = re.compile(rf"^{re.escape(base_name)}-(\d{{4}}-\d{{2}}-\d{{2}}){re.escape(ext)}$")
    cutoff = date.today() - timedelta(days=retention_days)
    removed = 0

    for name in os.listdir(log_dir):
        match = pattern.match(name)
        if not match:
            continue
        try:
            file_date = datetime.strptime(match.group(1), "%Y-%m-%d").date()
        except ValueError:
            continue
        if file_date < cutoff:
            try:
                os.remove(os.path.join(log_dir, name))
                removed += 1
            except OSError as e:
                logging.getLogger(LOGGER_NAME).warning(f"Failed to remove old log {name}: {e}")
    return removed


class DailyNamedFileHandler(logging.Handler):
    """Log handler that writes to a dated log file and rolls over daily."""

    def __init__(self, base_log_file: str, retention_days: int):
        super().__init__()
        self.base_log_file = base_log_file
        self.retention_days = retention_days
        self._current_date = None
        self._stream = None
        self._open_for_date(date.today())

    def _open_for_date(self, target_date: date):
        if self._stream:
            self._stream.close()

        log_dir, _, _ = _parse_log_base(self.base_log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)

        self._current_date = target_date
        self.baseFilename = _get_dated_log_path(self.base_log_file, target_date)
        self._stream = open(self.baseFilename, "a", encoding="utf-8")

    def emit(self, record):
        try:
            today = date.today()
            if self._current_date != today:
                self._open_for_date(today)
                cleanup_old_logs(self.base_log_file, self.retention_days)

            msg = self.format(record)
            self._stream.write(msg + "\n")
            self.flush()
        except Exception:
            self.handleError(record)

    def flush(self):
        if self._stream:
            self._stream.flush()

    def close(self):
        try:
            if self._stream:
                self._stream.close()
        finally:
            self._stream = None
            super().close()


def _remove_handlers(target: logging.Logger):
    for h in target.handlers[:]:
        h.flush()
        h.close()
        target.removeHandler(h)


def reset_logger():
    """Close and detach the sync logger's handlers so it can be set up again."""
    global logger
    with logger_lock:
        _remove_handlers(logging.getLogger(LOGGER_NAME))
        logger = None
