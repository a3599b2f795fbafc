from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

ROOT_LABEL: str = "All Files"

CATEGORY_LABELS: Mapping[str, str] = MappingProxyType(
    {
        "transcripts": "Transcripts",
        "recordings": "Recordings",
        "documents": "Documents",
        "images": "Images",
        "videos": "Videos",
        "audio": "Audio",
        "archives": "Archives",
        "other": "Other",
    }
)


def category_label(
    category: Optional[str],
    labels: Mapping[str, str] = CATEGORY_LABELS,
    root_label: str = ROOT_LABEL,
) -> str:
    """
    Label of the synthetic root segment for a category.

    Unknown categories are shown as-is; no category shows the root label.
    """
    if not category:
        return root_label
    return labels.get(category, category)
