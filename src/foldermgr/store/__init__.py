"""Item store: the authoritative collection and its validated mutations."""

from __future__ import annotations

from .item_store import ItemStore
from .snapshot import ItemSnapshot

__all__ = ["ItemStore", "ItemSnapshot"]
