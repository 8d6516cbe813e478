"""Sync CTFd user profiles into a Google Sheet."""

from .config import Config, __version__
from .exceptions import SyncError, ConfigError, CTFdError, SheetWriteError
from .logging_utils import setup_logger, get_logger
from .models import UserRecord, FIELD_SLOTS
from .ctfd import CTFdClient
from .data import GoogleSheetsData
from .alerts import AlertSink, format_alert
from .sync import run_sync, main

__all__ = [
    'Config',
    '__version__',
    'SyncError',
    'ConfigError',
    'CTFdError',
    'SheetWriteError',
    'setup_logger',
    'get_logger',
    'UserRecord',
    'FIELD_SLOTS',
    'CTFdClient',
    'GoogleSheetsData',
    'AlertSink',
    'format_alert',
    'run_sync',
    'main',
]
