"""
Credential sources for the publish job.
Figma token from FIGMA_TOKEN; Google service account JSON from GOOGLE_CREDENTIALS,
falling back to a credentials.json file (GOOGLE_APPLICATION_CREDENTIALS, project root,
config/credentials.json).
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Protocol

from src.errors import CredentialError

FIGMA_TOKEN_ENV = "FIGMA_TOKEN"
GOOGLE_CREDENTIALS_ENV = "GOOGLE_CREDENTIALS"


def get_credentials_path(project_root: str | Path | None = None) -> Path:
    """
    Return path to credentials.json for Google Sheets API (service account).
    Order: GOOGLE_APPLICATION_CREDENTIALS env, then project_root/credentials.json,
    then project_root/config/credentials.json, then cwd.
    """
    env_path = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")
    if env_path and Path(env_path).is_file():
        return Path(env_path)
    root = Path(project_root) if project_root else Path.cwd()
    candidates = [
        root / "credentials.json",
        root / "config" / "credentials.json",
    ]
    for p in candidates:
        if p.is_file():
            return p
    return root / "credentials.json"  # default for clearer error if missing


class CredentialSource(Protocol):
    """Supplies the two secrets a publish run needs."""

    def figma_token(self) -> str: ...

    def google_credentials(self) -> dict[str, Any]: ...


def service_account_identity(info: Mapping[str, Any]) -> str:
    return str(info.get("client_email") or "<unknown service account>")


def _parse_service_account(raw: str, origin: str) -> dict[str, Any]:
    try:
        info = json.loads(raw)
    except json.JSONDecodeError as e:
        raise CredentialError(f"{origin} is not valid JSON: {e.msg}") from e
    if not isinstance(info, dict):
        raise CredentialError(f"{origin} must contain a JSON object")
    return info


def load_service_account_file(path: str | Path) -> dict[str, Any]:
    """Read a service account credentials.json file."""
    path = Path(path)
    if not path.is_file():
        raise CredentialError(f"Credentials not found: {path}")
    return _parse_service_account(path.read_text(encoding="utf-8"), str(path))


class EnvCredentialSource:
    """Reads credentials from the process environment (or a given mapping)."""

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        project_root: str | Path | None = None,
    ):
        self.environ = os.environ if environ is None else environ
        self.project_root = project_root

    def figma_token(self) -> str:
        token = (self.environ.get(FIGMA_TOKEN_ENV) or "").strip()
        if not token:
            raise CredentialError(f"{FIGMA_TOKEN_ENV} is not set")
        return token

    def google_credentials(self) -> dict[str, Any]:
        raw = (self.environ.get(GOOGLE_CREDENTIALS_ENV) or "").strip()
        if raw:
            return _parse_service_account(raw, GOOGLE_CREDENTIALS_ENV)
        path = get_credentials_path(self.project_root)
        if not path.is_file():
            raise CredentialError(
                f"{GOOGLE_CREDENTIALS_ENV} is not set and no credentials file at {path}. "
                "Set the variable or place credentials.json in project root."
            )
        return load_service_account_file(path)


@dataclass
class StaticCredentialSource:
    """Fixed credentials, for tests and embedding."""
    token: str = ""
    service_account: dict[str, Any] = field(default_factory=dict)

    def figma_token(self) -> str:
        if not self.token:
            raise CredentialError("No Figma token configured")
        return self.token

    def google_credentials(self) -> dict[str, Any]:
        if not self.service_account:
            raise CredentialError("No service account configured")
        return dict(self.service_account)
