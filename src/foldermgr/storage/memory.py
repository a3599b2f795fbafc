"""In-memory ItemStorage."""

from __future__ import annotations

from typing import Iterable, Sequence

from foldermgr.models import Item


class MemoryStorage:
    """Keeps the last saved collection in memory (items are immutable)."""

    def __init__(self, items: Iterable[Item] = ()) -> None:
        self._items: list[Item] = list(items)
        self.save_count = 0

    def load(self) -> list[Item]:
        return list(self._items)

    def save(self, items: Sequence[Item]) -> None:
        self._items = list(items)
        self.save_count += 1
