"""Google Sheets data access wrapper."""
import json
from typing import List, Sequence

import gspread
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials

from .exceptions import ConfigError, SheetWriteError
from .logging_utils import get_logger

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


class GoogleSheetsData:
    """Wrapper for the spreadsheet the sync overwrites."""

    def __init__(
        self,
        spreadsheet_id: str,
        creds_file: str = "service-account.json",
        write_range: str = "STAGING!A2:J",
    ):
        self.spreadsheet_id = spreadsheet_id
        self.creds_file = creds_file
        self.write_range = write_range
        self.spreadsheet = None

    @classmethod
    def from_config(cls, config) -> "GoogleSheetsData":
        return cls(
            config["SPREADSHEET_ID"],
            creds_file=config["SERVICE_ACCOUNT_FILE"],
            write_range=config["SHEET_WRITE_RANGE"],
        )

    def _load_credentials(self) -> Credentials:
        try:
            with open(self.creds_file, "r", encoding="utf-8") as f:
                info = json.load(f)
        except OSError as e:
            raise ConfigError(f"Error reading {self.creds_file}", e) from e
        except ValueError as e:
            raise ConfigError("Error parsing client secret file to config", e) from e

        if not isinstance(info, dict):
            raise ConfigError(
                "Error parsing client secret file to config",
                ValueError(f"expected a JSON object, got {type(info).__name__}"),
            )

        try:
            return Credentials.from_service_account_info(info, scopes=SCOPES)
        except (ValueError, KeyError, GoogleAuthError) as e:
            raise ConfigError("Error parsing client secret file to config", e) from e

    def connect(self):
        """Authorize with the service account and open the spreadsheet by key."""
        creds = self._load_credentials()
        try:
            client = gspread.authorize(creds)
            self.spreadsheet = client.open_by_key(self.spreadsheet_id)
        except (gspread.exceptions.GSpreadException, GoogleAuthError, OSError) as e:
            raise SheetWriteError("Unable to retrieve Sheets client", e) from e

        get_logger().info("Google Sheets connection established")
        return self

    def is_connected(self) -> bool:
        return self.spreadsheet is not None

    def overwrite_rows(self, rows: Sequence[Sequence[str]]) -> dict:
        """Overwrite the target range with rows in a single RAW values update.

        Cells below the last row are left as they are; nothing is appended.
        An empty rows list is sent as-is.
        """
        if not self.is_connected():
            raise SheetWriteError("Error updating sheet", RuntimeError("Google Sheets not connected"))

        values: List[List[str]] = [list(row) for row in rows]
        try:
            response = self.spreadsheet.values_update(
                self.write_range,
                params={"valueInputOption": "RAW"},
                body={"values": values},
            )
        except (gspread.exceptions.GSpreadException, GoogleAuthError, OSError) as e:
            raise SheetWriteError("Error updating sheet", e) from e

        get_logger().info(f"Wrote {len(values)} rows to {self.write_range}")
        return response
