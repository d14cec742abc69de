"""
Publish stage: writes the component table to a Google Sheet.
Authenticates with a service account document (GOOGLE_CREDENTIALS or credentials.json).
"""

from .config import CredentialSource, EnvCredentialSource, StaticCredentialSource, get_credentials_path

# Lazy import so credential helpers work without requiring gspread
def __getattr__(name: str):
    if name == "SheetPublisher":
        from .writer import SheetPublisher
        return SheetPublisher
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "CredentialSource",
    "EnvCredentialSource",
    "StaticCredentialSource",
    "get_credentials_path",
    "SheetPublisher",
]
