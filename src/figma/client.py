"""
Thin client for the Figma REST API.
One GET per call, no retries. Non-success responses raise RemoteFetchError.
"""

import logging
from typing import Any, Iterable

import requests

from src.errors import RemoteFetchError

from .records import ComponentRecord, parse_components, parse_usages

logger = logging.getLogger(__name__)

FIGMA_API_BASE = "https://api.figma.com/v1"


class FigmaClient:
    """
    Reads component data from Figma with a personal access token.
    Pass `session` to reuse or fake the HTTP layer.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = FIGMA_API_BASE,
        timeout: float | None = 60,
        session: requests.Session | None = None,
    ):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session

    def _get_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> "FigmaClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _get(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self._get_session().get(
                url,
                headers={"X-Figma-Token": self.token},
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RemoteFetchError(f"Figma API request failed: {e}") from e
        if not response.ok:
            raise RemoteFetchError(
                f"Figma API error: {response.status_code} {response.reason}",
                status_code=response.status_code,
                reason=response.reason or "",
            )
        try:
            return response.json()
        except ValueError as e:
            raise RemoteFetchError(f"Figma API returned invalid JSON from {path}") from e

    def get_components(self, file_key: str) -> list[ComponentRecord]:
        """Published components of a file, in the order Figma returns them."""
        records = parse_components(self._get(f"/files/{file_key}/components"))
        logger.info("Fetched %d components from file %s", len(records), file_key)
        return records

    def get_component_usages(self, file_key: str, node_ids: Iterable[str]) -> dict[str, int]:
        """
        Instance counts keyed by node_id, looked up in one batched request.
        Ids absent from the response are simply missing from the result.
        """
        ids = ",".join(node_ids)
        if not ids:
            return {}
        usages = parse_usages(self._get(f"/files/{file_key}/component_usages", params={"ids": ids}))
        logger.info("Fetched usage counts for %d components", len(usages))
        return usages

    def get_file_document(self, file_key: str) -> dict[str, Any]:
        """Full node tree of a file (the `document` key of /v1/files/:key)."""
        payload = self._get(f"/files/{file_key}")
        document = payload.get("document")
        if not isinstance(document, dict):
            raise RemoteFetchError(f"Figma API response for {file_key} has no document")
        return document
