"""Public error exports for foldermgr."""

from __future__ import annotations

from .exceptions import (
    CycleError,
    FolderMgrError,
    NotFoundError,
    StorageError,
    TypeMismatchError,
    ValidationError,
)

__all__ = [
    "FolderMgrError",
    "ValidationError",
    "NotFoundError",
    "TypeMismatchError",
    "CycleError",
    "StorageError",
]
