"""
Publish a table to a Google Sheet: verify access, clear a fixed range, write.
Uses a service account (JSON document) for authentication.
"""

import logging
from typing import Any, Mapping

import gspread
import requests
from google.auth.exceptions import GoogleAuthError
from gspread.utils import absolute_range_name

from src.errors import AccessError, RemoteWriteError
from src.transform.rows import PublishBatch

from .config import service_account_identity

logger = logging.getLogger(__name__)

DEFAULT_CLEAR_RANGE = "A1:Z1000"
DEFAULT_ORIGIN = "A1"

# Anything the Sheets round trip can raise short of a programming error
SHEETS_ERRORS = (gspread.exceptions.GSpreadException, GoogleAuthError, requests.RequestException)


def qualified_range(range_a1: str, worksheet: str | None = None) -> str:
    """Prefix an A1 range with a worksheet title; bare ranges hit the first sheet."""
    if not worksheet:
        return range_a1
    return absolute_range_name(worksheet, range_a1)


class SheetPublisher:
    """
    Overwrites a spreadsheet range with a PublishBatch.
    `client` lets callers hand in an already authorized (or fake) gspread client.
    """

    def __init__(
        self,
        service_account: Mapping[str, Any],
        *,
        client: gspread.Client | None = None,
    ):
        self.service_account = dict(service_account)
        self.identity = service_account_identity(self.service_account)
        self._client = client

    def _get_client(self) -> gspread.Client:
        if self._client is None:
            try:
                self._client = gspread.service_account_from_dict(
                    self.service_account,
                    scopes=gspread.auth.DEFAULT_SCOPES,
                )
            except (ValueError, KeyError, GoogleAuthError) as e:
                raise AccessError(
                    f"Cannot authorize service account {self.identity}: {e}",
                    identity=self.identity,
                ) from e
        return self._client

    def verify_access(self, spreadsheet_id: str) -> gspread.Spreadsheet:
        """
        Open the spreadsheet, which reads its metadata. Fails with AccessError
        naming the service account so the operator knows whom to share the sheet with.
        """
        client = self._get_client()
        try:
            spreadsheet = client.open_by_key(spreadsheet_id)
        except SHEETS_ERRORS as e:
            raise AccessError(
                f"Service account {self.identity} cannot open spreadsheet {spreadsheet_id}: {e}. "
                "Share the sheet with this account as editor.",
                identity=self.identity,
            ) from e
        logger.info("Access to spreadsheet %s verified as %s", spreadsheet_id, self.identity)
        return spreadsheet

    def clear(
        self,
        spreadsheet: gspread.Spreadsheet,
        clear_range: str = DEFAULT_CLEAR_RANGE,
        worksheet: str | None = None,
    ) -> None:
        """Blank the whole fixed range, including rows a previous, longer run left behind."""
        target = qualified_range(clear_range, worksheet)
        try:
            spreadsheet.values_clear(target)
        except SHEETS_ERRORS as e:
            raise RemoteWriteError(f"Failed to clear {target}: {e}") from e
        logger.info("Cleared %s", target)

    def write(
        self,
        spreadsheet: gspread.Spreadsheet,
        batch: PublishBatch,
        origin: str = DEFAULT_ORIGIN,
        worksheet: str | None = None,
    ) -> int:
        """Write header + rows starting at origin. Returns the number of data rows."""
        target = qualified_range(origin, worksheet)
        try:
            spreadsheet.values_update(
                target,
                params={"valueInputOption": batch.value_input_option},
                body={"values": batch.values},
            )
        except SHEETS_ERRORS as e:
            raise RemoteWriteError(
                f"Failed to write {len(batch.rows)} rows at {target} (range already cleared, re-run the job): {e}"
            ) from e
        logger.info("Wrote %d rows at %s (%s)", len(batch.rows), target, batch.value_input_option)
        return len(batch.rows)

    def publish(
        self,
        spreadsheet_id: str,
        batch: PublishBatch,
        *,
        clear_range: str = DEFAULT_CLEAR_RANGE,
        origin: str = DEFAULT_ORIGIN,
        worksheet: str | None = None,
    ) -> int:
        """Verify, clear, write in one call."""
        spreadsheet = self.verify_access(spreadsheet_id)
        self.clear(spreadsheet, clear_range, worksheet)
        return self.write(spreadsheet, batch, origin, worksheet)
