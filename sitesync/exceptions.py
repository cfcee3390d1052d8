"""Exceptions raised by SiteSync.

Only fatal conditions are raised as exceptions. Failures of individual
uploads and deletes are returned as values (see :mod:`sitesync.storage`)
so that one bad file never stops the rest of the site from syncing.
"""


class SiteSyncError(Exception):
    """Base exception for all SiteSync errors."""


class SiteSyncConfigError(SiteSyncError):
    """Raised when required configuration is missing or invalid."""


class DirectoryNotFoundError(SiteSyncError):
    """Raised when the source directory is missing, not a directory or unreadable."""

    def __init__(self, directory: str, reason: str = "does not exist"):
        self.directory = directory
        self.reason = reason
        super().__init__(f"The source directory {directory} {reason}")


class ListingFailedError(SiteSyncError):
    """Raised when the remote container cannot be listed."""

    def __init__(self, container: str, message: str, code: str = ""):
        self.container = container
        self.code = code
        self.message = message
        detail = f"{code}: {message}" if code else message
        super().__init__(f"Failed to list container {container!r}: {detail}")
