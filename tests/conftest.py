"""
pytest fixtures: fake Figma HTTP session and fake gspread client.

Usage:
    def test_something(figma_session, sheets_client):
        figma_session.components = make_components(3)
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import gspread
import pytest

from src.figma.client import FigmaClient
from src.orchestration.pipeline import PublishConfig
from src.sheet_writer.config import StaticCredentialSource
from src.sheet_writer.writer import SheetPublisher

FILE_KEY = "FILEKEY123"
SPREADSHEET_ID = "SHEET456"
SERVICE_ACCOUNT = {
    "type": "service_account",
    "client_email": "publisher@demo-project.iam.gserviceaccount.com",
    "private_key": "unused",
}


def make_components(count: int) -> list[dict[str, Any]]:
    """Raw component entries as the /components endpoint returns them."""
    return [
        {
            "node_id": f"1:{i}",
            "name": f"Button/{i}",
            "description": f"Variant {i}" if i % 2 else "",
        }
        for i in range(1, count + 1)
    ]


# ============================================================================
# Figma fakes
# ============================================================================

class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, reason: str = "OK"):
        self.status_code = status_code
        self.reason = reason
        self._payload = payload

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeFigmaSession:
    """Answers the three Figma endpoints from in-memory data."""

    def __init__(self):
        self.components: list[dict[str, Any]] = []
        self.usages: dict[str, dict[str, Any]] = {}
        self.document: dict[str, Any] = {"children": []}
        self.error: FakeResponse | None = None
        self.failures: dict[str, FakeResponse] = {}  # url suffix -> response
        self.raise_exc: Exception | None = None
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def get(self, url, headers=None, params=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "params": params, "timeout": timeout})
        if self.raise_exc is not None:
            raise self.raise_exc
        if self.error is not None:
            return self.error
        for suffix, response in self.failures.items():
            if url.endswith(suffix):
                return response
        if url.endswith("/components"):
            return FakeResponse(payload={"meta": {"components": self.components}})
        if url.endswith("/component_usages"):
            return FakeResponse(payload={"meta": self.usages})
        return FakeResponse(payload={"document": self.document})

    def close(self):
        self.closed = True


# ============================================================================
# Google Sheets fakes
# ============================================================================

class FakeSpreadsheet:
    def __init__(self, log: list, title: str = "Components"):
        self.title = title
        self._log = log
        self.fail_clear: Exception | None = None
        self.fail_update: Exception | None = None

    def values_clear(self, range):
        self._log.append(("clear", range))
        if self.fail_clear is not None:
            raise self.fail_clear
        return {}

    def values_update(self, range, params=None, body=None):
        self._log.append(("update", range, params, body))
        if self.fail_update is not None:
            raise self.fail_update
        return {"updatedRows": len(body["values"])}

    def worksheets(self):
        return []


class FakeSheetsClient:
    """Stands in for gspread.Client; records every call in `log`."""

    def __init__(self):
        self.log: list = []
        self.spreadsheet = FakeSpreadsheet(self.log)
        self.open_error: Exception | None = None

    def open_by_key(self, key):
        self.log.append(("open", key))
        if self.open_error is not None:
            raise self.open_error
        return self.spreadsheet

    @property
    def writes(self) -> list:
        return [c for c in self.log if c[0] in ("clear", "update")]

    def deny(self):
        self.open_error = gspread.exceptions.SpreadsheetNotFound("Requested entity was not found.")


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def figma_session() -> FakeFigmaSession:
    return FakeFigmaSession()


@pytest.fixture
def figma_client(figma_session: FakeFigmaSession) -> FigmaClient:
    return FigmaClient("figd_test_token", session=figma_session)


@pytest.fixture
def sheets_client() -> FakeSheetsClient:
    return FakeSheetsClient()


@pytest.fixture
def publisher(sheets_client: FakeSheetsClient) -> SheetPublisher:
    return SheetPublisher(SERVICE_ACCOUNT, client=sheets_client)


@pytest.fixture
def credentials() -> StaticCredentialSource:
    return StaticCredentialSource(token="figd_test_token", service_account=dict(SERVICE_ACCOUNT))


@pytest.fixture
def config() -> PublishConfig:
    return PublishConfig(file_key=FILE_KEY, spreadsheet_id=SPREADSHEET_ID)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 5, 17, 9, 30, 0, tzinfo=timezone.utc)
