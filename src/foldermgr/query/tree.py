"""Folder tree derivation for sidebars and destination pickers."""

from __future__ import annotations

from typing import Iterable, Optional

from foldermgr.models import FolderNode, Item
from foldermgr.store import ItemSnapshot

from .sorting import SortKey, SortOrder, sort_items


def build_folder_tree(
    snapshot: ItemSnapshot,
    parent_id: Optional[str] = None,
    category: Optional[str] = None,
    excluded: Iterable[str] = (),
    *,
    sort_key: Optional[SortKey | str] = None,
    order: Optional[SortOrder | str] = None,
) -> list[FolderNode]:
    """
    Build the folder-only tree below `parent_id` (None = root level).

    Rules:
        - Only folders are included; files never appear.
        - If `category` is given, a folder is kept only if its category
          matches, and the same filter applies at every level.
        - Folders in `excluded` are pruned together with their subtree; asking
          for the tree below an excluded folder yields [].
        - Siblings keep insertion order unless `sort_key` is given.
    """
    excluded_ids = frozenset(excluded)
    if parent_id is not None and excluded_ids:
        chain = {parent_id, *snapshot.iter_ancestor_ids(parent_id)}
        if chain & excluded_ids:
            return []

    return _build(snapshot, parent_id, category, excluded_ids, sort_key, order)


def folder_options(
    snapshot: ItemSnapshot,
    excluded: Iterable[str] = (),
    category: Optional[str] = None,
) -> list[tuple[int, Item]]:
    """Flatten the folder tree into (depth, folder) rows, depth-first."""
    rows: list[tuple[int, Item]] = []
    for node in build_folder_tree(snapshot, None, category, excluded):
        rows.extend((d, n.item) for d, n in node.walk())
    return rows


def _build(
    snapshot: ItemSnapshot,
    parent_id: Optional[str],
    category: Optional[str],
    excluded_ids: frozenset[str],
    sort_key: Optional[SortKey | str],
    order: Optional[SortOrder | str],
) -> list[FolderNode]:
    folders = [
        item
        for item in snapshot.children(parent_id)
        if item.is_folder
        and item.id not in excluded_ids
        and (not category or item.category == category)
    ]
    if sort_key is not None:
        folders = sort_items(folders, sort_key, order or SortOrder.ASC)

    return [
        FolderNode(
            item=folder,
            children=tuple(
                _build(snapshot, folder.id, category, excluded_ids, sort_key, order)
            ),
        )
        for folder in folders
    ]
