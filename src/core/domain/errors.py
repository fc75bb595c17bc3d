"""Error types shared by the core and its adapters.

Transport errors surface to callers (the feed turns them into its ``Error``
state). Storage errors are raised by the key-value store adapter and are
absorbed at the favorites/cache/theme boundary.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for every error raised by Multiverso Hub."""


class TransportError(AppError):
    """The remote resource could not be reached or answered with a failure status."""

    def __init__(self, message: str, *, endpoint: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.endpoint = endpoint
        self.status_code = status_code

    def __str__(self) -> str:
        base = super().__str__()
        if self.status_code is not None:
            return f"{base} (endpoint={self.endpoint}, status={self.status_code})"
        return f"{base} (endpoint={self.endpoint})"


class StorageError(AppError):
    """Base class for persistence failures of the key-value store."""

    def __init__(self, message: str, *, key: str) -> None:
        super().__init__(message)
        self.key = key


class StorageReadError(StorageError):
    """A record exists but could not be read."""


class StorageWriteError(StorageError):
    """A record could not be written or deleted."""
