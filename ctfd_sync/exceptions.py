"""Exception classes for the CTFd user sync.

Every exception here is fatal. ``sync.main`` catches ``SyncError`` once,
hands ``message`` and ``cause`` to the alert sink and exits non-zero.
"""
from typing import Optional


class SyncError(Exception):
    """Base class for errors that abort a sync run.

    Args:
        message: Human-readable summary used as the alert text.
        cause: The underlying exception, rendered inside the alert code block.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(f"{message}: {cause}" if cause is not None else message)


class ConfigError(SyncError):
    """Raised when the .env file, required settings or credential file can't be loaded."""


class CTFdError(SyncError):
    """Raised on transport, HTTP status, JSON decode or schema errors from CTFd."""


class SheetWriteError(SyncError):
    """Raised when the Sheets client can't be built or the update is rejected."""
