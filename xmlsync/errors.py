"""
Exceptions raised while syncing the feed into the content directory.
"""
from pathlib import Path
from typing import Optional


class XmlSyncError(Exception):
    """Base class for all sync errors."""


class FeedFetchError(XmlSyncError):
    """The feed could not be downloaded (transport failure or non-2xx status)."""

    def __init__(
        self,
        url: str,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        self.url = url
        self.status_code = status_code
        self.cause = cause
        if status_code is not None:
            message = f"HTTP {status_code} fetching {url}"
        else:
            message = f"Could not fetch {url}: {cause}"
        super().__init__(message)


class FeedParseError(XmlSyncError):
    """The feed body is not well-formed XML."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Malformed feed document: {cause}")


class StoreScanError(XmlSyncError):
    """The content directory exists but cannot be listed."""

    def __init__(self, path: Path, cause: BaseException):
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot read content directory {path}: {cause}")


class RecordWriteError(XmlSyncError):
    """A single listing file could not be written."""

    def __init__(self, listing_id: str, path: Path, cause: BaseException):
        self.listing_id = listing_id
        self.path = path
        self.cause = cause
        super().__init__(f"Error writing file {path}: {cause}")


class RecordDeleteError(XmlSyncError):
    """A single listing file could not be removed."""

    def __init__(self, listing_id: str, path: Path, cause: BaseException):
        self.listing_id = listing_id
        self.path = path
        self.cause = cause
        super().__init__(f"Error removing file {path}: {cause}")


# Errors that abort a run before anything is written.
FATAL_ERRORS = (FeedFetchError, FeedParseError, StoreScanError)
