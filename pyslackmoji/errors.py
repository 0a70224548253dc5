# -----------------------------------------------------------------------------
# error types
# -----------------------------------------------------------------------------
from __future__ import annotations


class BackupError(RuntimeError):
    pass


class ConfigError(BackupError):
    pass


class ListingError(BackupError):
    """Listing could not be obtained; the whole run is aborted."""


class ListingNetworkError(ListingError):
    pass


class ListingDecodeError(ListingError):
    pass


class ApiError(ListingError):
    """``ok: false`` response. The message is Slack's own error code, kept verbatim."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ImageFetchError(BackupError):
    """Single image download failure, isolated to its worker."""

    def __init__(self, name: str, url: str, reason: str):
        super().__init__(reason)
        self.name = name
        self.url = url
        self.reason = reason
