"""Persistence boundary for foldermgr."""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from foldermgr.models import Item


@runtime_checkable
class ItemStorage(Protocol):
    """
    Where the item collection lives between sessions.

    The core never calls storage itself; FileManager saves after each
    successful mutation.
    """

    def load(self) -> list[Item]:
        """Return all persisted items in their stored order."""
        ...

    def save(self, items: Sequence[Item]) -> None:
        """Replace the persisted collection with `items`."""
        ...
