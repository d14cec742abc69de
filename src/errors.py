"""
Errors raised by the publish pipeline.
Every error is terminal for a run: nothing is retried.
"""


class PublishError(Exception):
    """Base class for failures that abort a publish run."""


class CredentialError(PublishError):
    """Figma token or Google service-account document missing or unreadable."""


class RemoteFetchError(PublishError):
    """Figma API returned a non-success response or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None, reason: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class EmptyResultError(PublishError):
    """No components left to publish after selection."""


class AccessError(PublishError):
    """Spreadsheet not reachable with the configured service account."""

    def __init__(self, message: str, identity: str = ""):
        super().__init__(message)
        self.identity = identity


class RemoteWriteError(PublishError):
    """Clearing or writing the spreadsheet range failed."""
