"""Input rows handed over by upload flows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True, frozen=True)
class UploadedFile:
    """
    A file handed over by an upload flow.

    relative_path is only used by folder uploads ('a/b/file.txt').
    last_modified_ms is the epoch-millisecond form browsers report; it is
    used when modified_at is not given.
    """

    name: str
    size: int = 0
    file_type: Optional[str] = None
    modified_at: Optional[datetime] = None
    relative_path: Optional[str] = None
    last_modified_ms: Optional[int] = None
