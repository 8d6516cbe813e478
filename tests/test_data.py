"""Unit tests for Google Sheets data wrapper."""
import unittest
import tempfile
import os
import json
from unittest.mock import MagicMock, patch

import gspread

from ctfd_sync import logging_utils
from ctfd_sync.data import GoogleSheetsData, SCOPES
from ctfd_sync.exceptions import ConfigError, SheetWriteError


def setUpModule():
    logging_utils.reset_logger()
    logging_utils.setup_logger(log_file="")


def tearDownModule():
    logging_utils.reset_logger()


class TestGoogleSheetsData(unittest.TestCase):
    def _write_creds(self, contents):
        with tempfile.NamedTemporaryFile(mode="w", delete=False, suffix=".json") as f:
            f.write(contents)
            path = f.name
        self.addCleanup(os.unlink, path)
        return path

    def test_connect_success(self):
        creds_path = self._write_creds(json.dumps({"type": "service_account"}))
        data_client = GoogleSheetsData("sheet123", creds_file=creds_path)

        mock_spreadsheet = MagicMock()
        mock_client = MagicMock()
        mock_client.open_by_key.return_value = mock_spreadsheet

        with patch("ctfd_sync.data.Credentials") as creds_mock, \
                patch("ctfd_sync.data.gspread.authorize", return_value=mock_client) as authorize_mock:
            self.assertIs(data_client.connect(), data_client)

        creds_mock.from_service_account_info.assert_called_once_with(
            {"type": "service_account"}, scopes=SCOPES
        )
        authorize_mock.assert_called_once_with(creds_mock.from_service_account_info.return_value)
        mock_client.open_by_key.assert_called_once_with("sheet123")
        self.assertTrue(data_client.is_connected())
        self.assertIs(data_client.spreadsheet, mock_spreadsheet)

    def test_connect_missing_creds_file(self):
        data_client = GoogleSheetsData("sheet123", creds_file="/nonexistent/service-account.json")
        with self.assertRaises(ConfigError) as ctx:
            data_client.connect()
        self.assertEqual(ctx.exception.message, "Error reading /nonexistent/service-account.json")

    def test_connect_malformed_creds_json(self):
        creds_path = self._write_creds("{not json")
        data_client = GoogleSheetsData("sheet123", creds_file=creds_path)
        with self.assertRaises(ConfigError) as ctx:
            data_client.connect()
        self.assertEqual(ctx.exception.message, "Error parsing client secret file to config")

    def test_connect_creds_not_an_object(self):
        for contents in ("[]", '"x"'):
            creds_path = self._write_creds(contents)
            data_client = GoogleSheetsData("sheet123", creds_file=creds_path)
            with self.assertRaises(ConfigError) as ctx:
                data_client.connect()
            self.assertEqual(ctx.exception.message, "Error parsing client secret file to config")

    def test_connect_incomplete_creds(self):
        creds_path = self._write_creds(json.dumps({"type": "service_account"}))
        data_client = GoogleSheetsData("sheet123", creds_file=creds_path)
        with self.assertRaises(ConfigError) as ctx:
            data_client.connect()
        self.assertEqual(ctx.exception.message, "Error parsing client secret file to config")

    def test_connect_open_failure(self):
        creds_path = self._write_creds(json.dumps({"type": "service_account"}))
        data_client = GoogleSheetsData("sheet123", creds_file=creds_path)
        mock_client = MagicMock()
        mock_client.open_by_key.side_effect = gspread.exceptions.SpreadsheetNotFound()

        with patch("ctfd_sync.data.Credentials"), \
                patch("ctfd_sync.data.gspread.authorize", return_value=mock_client):
            with self.assertRaises(SheetWriteError) as ctx:
                data_client.connect()
        self.assertEqual(ctx.exception.message, "Unable to retrieve Sheets client")
        self.assertFalse(data_client.is_connected())

    def test_overwrite_rows_not_connected(self):
        data_client = GoogleSheetsData("sheet123")
        with self.assertRaises(SheetWriteError):
            data_client.overwrite_rows([["a"]])

    def test_overwrite_rows_raw_update(self):
        data_client = GoogleSheetsData("sheet123")
        data_client.spreadsheet = MagicMock()
        rows = [("alice", "a@example.com") + ("",) * 7, ["bob", "=1+1"] + [""] * 7]

        data_client.overwrite_rows(rows)

        data_client.spreadsheet.values_update.assert_called_once_with(
            "STAGING!A2:J",
            params={"valueInputOption": "RAW"},
            body={"values": [list(rows[0]), rows[1]]},
        )

    def test_overwrite_rows_empty(self):
        data_client = GoogleSheetsData("sheet123")
        data_client.spreadsheet = MagicMock()

        data_client.overwrite_rows([])

        data_client.spreadsheet.values_update.assert_called_once_with(
            "STAGING!A2:J",
            params={"valueInputOption": "RAW"},
            body={"values": []},
        )

    def test_overwrite_rows_custom_range(self):
        data_client = GoogleSheetsData("sheet123", write_range="OTHER!A2:J")
        data_client.spreadsheet = MagicMock()
        data_client.overwrite_rows([["x"]])
        self.assertEqual(data_client.spreadsheet.values_update.call_args.args[0], "OTHER!A2:J")

    def test_overwrite_rows_api_error(self):
        data_client = GoogleSheetsData("sheet123")
        data_client.spreadsheet = MagicMock()
        data_client.spreadsheet.values_update.side_effect = gspread.exceptions.GSpreadException("bad range")

        with self.assertRaises(SheetWriteError) as ctx:
            data_client.overwrite_rows([["a"]])
        self.assertEqual(ctx.exception.message, "Error updating sheet")


if __name__ == "__main__":
    unittest.main()
