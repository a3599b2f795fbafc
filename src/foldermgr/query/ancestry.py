"""Ancestry and subtree queries."""

from __future__ import annotations

from foldermgr.store import ItemSnapshot


def is_descendant(snapshot: ItemSnapshot, candidate_ancestor_id: str, item_id: str) -> bool:
    """
    Return True if `item_id` lies in the subtree of `candidate_ancestor_id`.

    Reflexive: an item is its own descendant. The ancestor chain is walked on
    every call, so the answer always reflects the given snapshot.
    """
    if candidate_ancestor_id == item_id:
        return True
    return candidate_ancestor_id in snapshot.iter_ancestor_ids(item_id)


def ancestor_ids(snapshot: ItemSnapshot, item_id: str) -> list[str]:
    """Parent chain of `item_id`, nearest first."""
    return list(snapshot.iter_ancestor_ids(item_id))


def depth(snapshot: ItemSnapshot, item_id: str) -> int:
    """Number of ancestors; root-level items have depth 0."""
    return len(ancestor_ids(snapshot, item_id))


def subtree_ids(snapshot: ItemSnapshot, item_id: str) -> list[str]:
    """`item_id` plus all its descendants, breadth-first. Unknown id -> []."""
    if not snapshot.has(item_id):
        return []
    return list(snapshot.iter_subtree_ids(item_id))


def descendant_ids(snapshot: ItemSnapshot, item_id: str) -> list[str]:
    """All descendants of `item_id` (excluding itself), breadth-first."""
    return subtree_ids(snapshot, item_id)[1:]


def path_names(snapshot: ItemSnapshot, item_id: str) -> list[str]:
    """Names from the top-level ancestor down to the item itself."""
    if not snapshot.has(item_id):
        return []
    chain = [item_id] + ancestor_ids(snapshot, item_id)
    return [snapshot.get(i).name for i in reversed(chain) if snapshot.has(i)]
