"""Data model for organizer items."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from .permission import Permission


class ItemKind(str, Enum):
    """Item kinds."""

    FILE = "file"
    FOLDER = "folder"


class FolderColor(str, Enum):
    """Display colors for folders (no effect on queries)."""

    BLUE = "blue"
    GREEN = "green"
    PURPLE = "purple"
    ORANGE = "orange"
    RED = "red"


@dataclass(slots=True, frozen=True)
class Item:
    """
    A file or folder record.

    Notes:
        - parent_id None means the item sits at root level.
        - Folders always report size 0; sizes of descendants are not aggregated.
        - Instances are immutable; ItemStore replaces them on mutation, so a
          snapshot never observes later changes.
    """

    id: str
    name: str
    kind: ItemKind
    parent_id: Optional[str] = None

    size: int = 0
    category: Optional[str] = None
    is_shared: bool = False
    color: Optional[FolderColor] = None

    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    modified_by: Optional[str] = None

    team_id: Optional[str] = None
    deal_id: Optional[str] = None
    owner_id: Optional[str] = None

    file_type: Optional[str] = None
    url: Optional[str] = None
    permissions: tuple[Permission, ...] = ()

    @property
    def is_folder(self) -> bool:
        return self.kind is ItemKind.FOLDER

    @property
    def is_file(self) -> bool:
        return self.kind is ItemKind.FILE

    @property
    def is_link(self) -> bool:
        return self.url is not None
