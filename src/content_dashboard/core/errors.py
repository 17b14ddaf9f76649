"""Domain exceptions."""


class ContentDashboardError(Exception):
    """Base class for dashboard errors."""


class SignatureError(ContentDashboardError):
    """Inbound webhook signature is missing or does not match."""


class StorageError(ContentDashboardError):
    """Changelog backend could not be read or written."""


class UpstreamError(ContentDashboardError):
    """An external API (version control, feed, video platform) failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
