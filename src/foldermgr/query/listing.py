"""Filtered, sorted listings for a view."""

from __future__ import annotations

from typing import Iterable, Optional

from foldermgr.models import Item
from foldermgr.store import ItemSnapshot

from .sorting import SortKey, SortOrder, sort_items


def matches(item: Item, category: Optional[str] = None, search: Optional[str] = None) -> bool:
    """Category equality (when given) and case-insensitive name substring (when given)."""
    if category and item.category != category:
        return False
    if search and search.casefold() not in item.name.casefold():
        return False
    return True


def filter_items(
    items: Iterable[Item],
    category: Optional[str] = None,
    search: Optional[str] = None,
) -> list[Item]:
    return [item for item in items if matches(item, category, search)]


def list_children(
    snapshot: ItemSnapshot,
    folder_id: Optional[str] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
    sort_key: SortKey | str = SortKey.NAME,
    order: SortOrder | str = SortOrder.ASC,
) -> list[Item]:
    """
    Direct children of `folder_id` (None = root level), filtered and sorted.

    An unknown folder_id yields [] rather than an error.
    """
    items = filter_items(snapshot.children(folder_id), category, search)
    return sort_items(items, sort_key, order)


def search_items(
    snapshot: ItemSnapshot,
    text: str,
    category: Optional[str] = None,
    sort_key: SortKey | str = SortKey.NAME,
    order: SortOrder | str = SortOrder.ASC,
) -> list[Item]:
    """Search the whole collection by name, regardless of position."""
    return sort_items(filter_items(snapshot.items, category, text), sort_key, order)
