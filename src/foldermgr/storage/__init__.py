"""Storage backends for foldermgr."""

from __future__ import annotations

from .base import ItemStorage
from .codec import item_from_dict, item_to_dict, permission_from_dict, permission_to_dict
from .json_file import JsonFileStorage
from .memory import MemoryStorage

__all__ = [
    "ItemStorage",
    "MemoryStorage",
    "JsonFileStorage",
    "item_to_dict",
    "item_from_dict",
    "permission_to_dict",
    "permission_from_dict",
]
