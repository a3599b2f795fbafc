"""foldermgr public API."""

from __future__ import annotations

from foldermgr.config import FileManagerConfig
from foldermgr.errors import (
    CycleError,
    FolderMgrError,
    NotFoundError,
    StorageError,
    TypeMismatchError,
    ValidationError,
)
from foldermgr.manager import FileManager
from foldermgr.models import (
    Breadcrumb,
    BulkResult,
    FolderColor,
    FolderNode,
    Item,
    ItemKind,
    OperationResult,
    Permission,
    PrincipalType,
    Role,
    UploadedFile,
)
from foldermgr.query import (
    SortKey,
    SortOrder,
    breadcrumb_path,
    build_folder_tree,
    is_descendant,
    list_children,
    sort_items,
)
from foldermgr.storage import ItemStorage, JsonFileStorage, MemoryStorage
from foldermgr.store import ItemSnapshot, ItemStore

__all__ = [
    # High-level
    "FileManager",
    "FileManagerConfig",
    # Store
    "ItemStore",
    "ItemSnapshot",
    # Queries
    "build_folder_tree",
    "list_children",
    "breadcrumb_path",
    "is_descendant",
    "sort_items",
    "SortKey",
    "SortOrder",
    # Storage
    "ItemStorage",
    "MemoryStorage",
    "JsonFileStorage",
    # Models
    "Item",
    "ItemKind",
    "FolderColor",
    "Permission",
    "PrincipalType",
    "Role",
    "FolderNode",
    "Breadcrumb",
    "UploadedFile",
    "OperationResult",
    "BulkResult",
    # Errors
    "FolderMgrError",
    "ValidationError",
    "NotFoundError",
    "TypeMismatchError",
    "CycleError",
    "StorageError",
]
