"""Public model exports for foldermgr."""

from __future__ import annotations

from .item import FolderColor, Item, ItemKind
from .permission import Permission, PrincipalType, Role
from .results import BulkResult, BulkStatus, OperationResult, OperationStatus
from .upload import UploadedFile
from .views import Breadcrumb, FolderNode

__all__ = [
    "Item",
    "ItemKind",
    "FolderColor",
    "Permission",
    "PrincipalType",
    "Role",
    "FolderNode",
    "Breadcrumb",
    "UploadedFile",
    "OperationStatus",
    "BulkStatus",
    "OperationResult",
    "BulkResult",
]
