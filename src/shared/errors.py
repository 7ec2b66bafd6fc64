"""Exception types for conditions folio cannot recover from locally.

Expected conditions (rate limits, rejected input, corrupt stored records)
are reported through return values instead.
"""

from __future__ import annotations


class FolioError(Exception):
    """Base class for folio errors."""


class StoreError(FolioError):
    """The backing store could not be read or written."""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
