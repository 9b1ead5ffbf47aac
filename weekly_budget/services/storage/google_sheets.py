"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets can hold the ledger because:
1. Users can look at their documents directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

Each key is one row of a two-column worksheet: `key | value`.

TRADEOFFS:
- A cell holds at most 50,000 characters, which caps the archive size
- Every call is a network round trip (fine for personal use)
- No transactions (the ledger serializes writes per key itself)
"""

import asyncio
from typing import Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from weekly_budget.config import GoogleSheetsSettings, get_settings
from weekly_budget.services.storage.interface import (
    ConnectionError,
    KeyValueStore,
    StorageReadError,
    StorageWriteError,
)


LEDGER_COLUMNS = ["key", "value"]

# Only transient API failures are worth retrying.
_retry_api_errors = retry(
    retry=retry_if_exception_type(gspread.exceptions.APIError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    reraise=True,
)


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_ledger_sheet(self) -> gspread.Worksheet:
        """Get or create the ledger worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.ledger_sheet_name)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=self._settings.ledger_sheet_name,
                rows=20,
                cols=len(LEDGER_COLUMNS),
            )
            sheet.append_row(LEDGER_COLUMNS)
        return sheet


class GoogleSheetsKeyValueStore(KeyValueStore):
    """
    Google Sheets implementation of the key-value store.

    gspread is synchronous, so each call runs in a worker thread.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    @staticmethod
    def _find_row(rows: list[list[str]], key: str) -> Optional[int]:
        """1-based sheet row index of a key (row 1 is the header)."""
        for idx, row in enumerate(rows[1:], start=2):
            if row and row[0] == key:
                return idx
        return None

    @_retry_api_errors
    def _read(self, key: str) -> Optional[str]:
        rows = self._client.get_ledger_sheet().get_all_values()
        idx = self._find_row(rows, key)
        if idx is None:
            return None
        row = rows[idx - 1]
        return row[1] if len(row) > 1 else ""

    @_retry_api_errors
    def _write(self, key: str, value: str) -> None:
        sheet = self._client.get_ledger_sheet()
        idx = self._find_row(sheet.get_all_values(), key)
        if idx is None:
            sheet.append_row([key, value], value_input_option="RAW")
        else:
            sheet.update(
                range_name=f"B{idx}",
                values=[[value]],
                value_input_option="RAW",
            )

    @_retry_api_errors
    def _remove(self, key: str) -> None:
        sheet = self._client.get_ledger_sheet()
        idx = self._find_row(sheet.get_all_values(), key)
        if idx is not None:
            sheet.delete_rows(idx)

    async def get_item(self, key: str) -> Optional[str]:
        try:
            return await asyncio.to_thread(self._read, key)
        except Exception as e:
            raise StorageReadError(f"Failed to read '{key}' from Google Sheets: {e}") from e

    async def set_item(self, key: str, value: str) -> None:
        try:
            await asyncio.to_thread(self._write, key, value)
        except Exception as e:
            raise StorageWriteError(f"Failed to write '{key}' to Google Sheets: {e}") from e

    async def remove_item(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._remove, key)
        except Exception as e:
            raise StorageWriteError(f"Failed to remove '{key}' from Google Sheets: {e}") from e
