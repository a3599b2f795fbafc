"""Immutable snapshot and indexes handed out by ItemStore."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional

from foldermgr.errors import CycleError
from foldermgr.models import Item


@dataclass(slots=True, frozen=True)
class ItemSnapshot:
    """
    Read-only view of the item collection at a point in time.

    Indexes:
        - items: insertion order
        - items_by_id
        - children_by_parent_id (None key = root level), insertion order

    A snapshot is only meaningful until the next mutation of the store it
    came from; take a fresh one after mutating.
    """

    items: tuple[Item, ...] = ()
    items_by_id: Mapping[str, Item] = field(default_factory=dict)
    children_by_parent_id: Mapping[Optional[str], tuple[str, ...]] = field(
        default_factory=dict
    )

    @classmethod
    def from_items(cls, items: Iterable[Item]) -> ItemSnapshot:
        ordered = tuple(items)
        by_id: dict[str, Item] = {}
        children: dict[Optional[str], list[str]] = {}
        for item in ordered:
            by_id[item.id] = item
            children.setdefault(item.parent_id, []).append(item.id)

        return cls(
            items=ordered,
            items_by_id=MappingProxyType(by_id),
            children_by_parent_id=MappingProxyType(
                {parent: tuple(ids) for parent, ids in children.items()}
            ),
        )

    def __len__(self) -> int:
        return len(self.items)

    # ----------------------------
    # Query helpers
    # ----------------------------
    def has(self, item_id: str) -> bool:
        return item_id in self.items_by_id

    def get(self, item_id: str) -> Item:
        return self.items_by_id[item_id]

    def find(self, item_id: Optional[str]) -> Optional[Item]:
        if item_id is None:
            return None
        return self.items_by_id.get(item_id)

    def children_ids(self, parent_id: Optional[str]) -> tuple[str, ...]:
        return self.children_by_parent_id.get(parent_id, ())

    def children(self, parent_id: Optional[str]) -> list[Item]:
        return [self.items_by_id[cid] for cid in self.children_ids(parent_id)]

    # ----------------------------
    # Traversal primitives (shared by store validation and queries)
    # ----------------------------
    def iter_ancestor_ids(self, item_id: str) -> Iterator[str]:
        """
        Yield parent ids of `item_id`, nearest first, up to a root-level item.

        Raises:
            CycleError: if the parent links loop back on themselves.
        """
        seen: set[str] = {item_id}
        cur = self.items_by_id.get(item_id)

        while cur is not None and cur.parent_id is not None:
            parent_id = cur.parent_id
            if parent_id in seen:
                raise CycleError(
                    "Parent links form a cycle",
                    details={"item_id": item_id, "parent_id": parent_id},
                )
            seen.add(parent_id)
            yield parent_id
            cur = self.items_by_id.get(parent_id)

    def iter_subtree_ids(self, item_id: str) -> Iterator[str]:
        """Yield `item_id` then all its descendants, breadth-first."""
        q: deque[str] = deque([item_id])
        visited: set[str] = set()

        while q:
            cur = q.popleft()
            if cur in visited:
                continue
            visited.add(cur)
            yield cur

            for child_id in self.children_ids(cur):
                if child_id not in visited:
                    q.append(child_id)
