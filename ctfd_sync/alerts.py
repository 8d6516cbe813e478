"""Discord webhook alerting for fatal sync errors."""
import sys
from typing import Optional

import requests

from .logging_utils import get_logger


def format_alert(message: str, error, ping_id: Optional[str] = None) -> str:
    """Build the webhook content: optional mention, message, error in a code block."""
    if ping_id:
        message = f"<@{ping_id}> {message}"
    return f"{message}\n```{error}```"


class AlertSink:
    """Posts a failure to a Discord webhook and terminates the process."""

    def __init__(
        self,
        webhook_url: Optional[str] = None,
        ping_id: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.webhook_url = webhook_url or None
        self.ping_id = ping_id or None
        self.session = session or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_config(cls, config, session: Optional[requests.Session] = None) -> "AlertSink":
        return cls(
            config.get("DISCORD_WEBHOOK"),
            config.get("DISCORD_ID_TO_PING"),
            session=session,
            timeout=config.http_timeout,
        )

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def notify(self, message: str, error) -> bool:
        """Send the alert. Returns True if the webhook accepted it.

        Never raises: failures to notify are logged.
        """
        log = get_logger()
        log.error(f"{message}: {error}")

        if not self.webhook_url:
            log.warning("DISCORD_WEBHOOK is not set")
            return False

        payload = {"content": format_alert(message, error, self.ping_id)}
        try:
            with self.session.post(self.webhook_url, json=payload, timeout=self.timeout) as resp:
                status = resp.status_code
        except requests.RequestException as e:
            log.error(f"Failed to send webhook alert: {e}")
            return False

        if status not in (200, 204):
            log.warning(f"Unexpected status code from webhook: {status}")
            return False
        return True

    def alert_and_exit(self, message: str, error, exit_code: int = 1):
        """Notify, then exit with exit_code whether or not the notify succeeded."""
        try:
            self.notify(message, error)
        finally:
            self.close()
        sys.exit(exit_code)
