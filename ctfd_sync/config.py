"""Configuration management for the CTFd user sync."""
import os
from typing import Mapping, Optional

from dotenv import dotenv_values

from .exceptions import ConfigError

__version__ = "0.1.0"

# Default configuration values
DEFAULT_CONFIG = {
    # CTFd
    "CTFD_URL": "",
    "CTFD_TOKEN": "",
    "CTFD_FOLLOW_PAGINATION": False,  # Send ?page=N instead of re-requesting the first page
    "CTFD_MAX_PAGES": 1000,
    "HTTP_TIMEOUT": 0.0,  # 0 means no timeout (library default)

    # Google Sheets
    "SPREADSHEET_ID": "",
    "SERVICE_ACCOUNT_FILE": "service-account.json",
    "SHEET_WRITE_RANGE": "STAGING!A2:J",

    # Discord alerts
    "DISCORD_WEBHOOK": "",
    "DISCORD_ID_TO_PING": "",

    # Logging
    "LOG_FILE": "logs/ctfd_sync.log",
    "LOG_LEVEL": "INFO",
    "LOG_RETENTION_DAYS": 7,
}

REQUIRED_KEYS = ("SPREADSHEET_ID", "CTFD_TOKEN", "CTFD_URL")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _coerce(key: str, value: str, default):
    """Convert a raw string to the type of the default value."""
    try:
        if isinstance(default, bool):
            lowered = value.strip().lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
            raise ValueError(f"not a boolean: {value!r}")
        if isinstance(default, (int, float)) and not value.strip():
            return default
        if isinstance(default, int):
            return int(value)
        if isinstance(default, float):
            return float(value)
    except ValueError as e:
        raise ConfigError(f"Invalid value for {key}", e) from e
    return value


class Config:
    """Configuration loaded once from defaults, a .env file and the environment.

    Environment variables win over the .env file, matching python-dotenv's
    ``load_dotenv(override=False)``.
    """

    def __init__(
        self,
        env_file: Optional[str] = ".env",
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.config = DEFAULT_CONFIG.copy()
        self.env_file = env_file

        # Load from .env file if provided
        file_values = {}
        if env_file is not None:
            if not os.path.isfile(env_file):
                raise ConfigError(
                    "Error loading .env file",
                    FileNotFoundError(f"No such file: {env_file}"),
                )
            file_values = {k: v for k, v in dotenv_values(env_file).items() if v is not None}

        # Override with environment variables
        env = os.environ if environ is None else environ
        self._load(file_values)
        self._load(env)

    def _load(self, values: Mapping[str, str]):
        for key, default in DEFAULT_CONFIG.items():
            value = values.get(key)
            if value is not None:
                self.config[key] = _coerce(key, value, default)

    def validate(self):
        """Raise ConfigError if a required setting is empty."""
        missing = [key for key in REQUIRED_KEYS if not self.config.get(key)]
        if missing:
            raise ConfigError(
                "Missing required configuration",
                ValueError(", ".join(missing) + " not set"),
            )
        return self

    @property
    def http_timeout(self) -> Optional[float]:
        timeout = self.config["HTTP_TIMEOUT"]
        return timeout if timeout and timeout > 0 else None

    def get(self, key: str, default=None):
        """Get configuration value."""
        return self.config.get(key, default)

    def __getitem__(self, key: str):
        """Get configuration value using dictionary syntax."""
        return self.config[key]
