"""Derived, read-only view models produced by the query engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from .item import Item


@dataclass(slots=True, frozen=True)
class FolderNode:
    """A folder and its (already filtered) sub-folders."""

    item: Item
    children: tuple[FolderNode, ...] = field(default_factory=tuple)

    @property
    def id(self) -> str:
        return self.item.id

    def walk(self, depth: int = 0) -> Iterator[tuple[int, FolderNode]]:
        """Yield (depth, node) pairs depth-first, self first."""
        yield depth, self
        for child in self.children:
            yield from child.walk(depth + 1)


@dataclass(slots=True, frozen=True)
class Breadcrumb:
    """One segment of a breadcrumb path. The synthetic root segment has id 'root'."""

    id: str
    name: str

