"""Exception hierarchy for foldermgr."""

from __future__ import annotations

from typing import Any, Optional


class FolderMgrError(Exception):
    """
    Base exception for foldermgr.

    Attributes:
        details: Optional structured information (e.g., offending ids).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class ValidationError(FolderMgrError):
    """Raised when input is malformed (blank name, unknown attribute, bad URL)."""


class NotFoundError(FolderMgrError):
    """Raised when a referenced item id does not exist."""


class TypeMismatchError(FolderMgrError):
    """Raised when an operation expects a folder but got a file (or vice versa)."""


class CycleError(FolderMgrError):
    """Raised when an operation would make an item its own ancestor."""


class StorageError(FolderMgrError):
    """Raised when persisted items cannot be loaded or saved."""
