"""FileManager configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from foldermgr.query import SortKey
from foldermgr.util.categories import CATEGORY_LABELS, ROOT_LABEL
from foldermgr.util.names import COPY_SUFFIX


@dataclass(frozen=True)
class FileManagerConfig:
    """Labels and defaults used by FileManager. Pass an instance to override."""

    root_label: str = ROOT_LABEL
    copy_suffix: str = COPY_SUFFIX
    default_folder_name: str = "New Folder"
    default_link_name: str = "New Link"
    default_file_type: str = "unknown"
    category_labels: Mapping[str, str] = field(default_factory=lambda: CATEGORY_LABELS)
    default_sort_key: SortKey = SortKey.NAME
