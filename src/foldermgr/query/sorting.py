"""Deterministic ordering of item listings."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Iterable

from foldermgr.errors import ValidationError
from foldermgr.models import Item


class SortKey(str, Enum):
    """Sort keys offered by listings."""

    NAME = "name"
    MODIFIED = "modified"
    SIZE = "size"
    KIND = "type"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def default_for(cls, key: SortKey | str) -> SortOrder:
        """Newest-first for timestamps, ascending for everything else."""
        return cls.DESC if _coerce_key(key) is SortKey.MODIFIED else cls.ASC

    def flipped(self) -> SortOrder:
        return SortOrder.DESC if self is SortOrder.ASC else SortOrder.ASC


# Items without a timestamp sort as the oldest.
_OLDEST: datetime = datetime.min.replace(tzinfo=timezone.utc)

_PRIMARY_KEYS: dict[SortKey, Callable[[Item], Any]] = {
    SortKey.NAME: lambda item: item.name.casefold(),
    SortKey.MODIFIED: lambda item: item.modified_at or _OLDEST,
    SortKey.SIZE: lambda item: 0 if item.is_folder else item.size,
    SortKey.KIND: lambda item: 0 if item.is_folder else 1,
}


def tie_break_key(item: Item) -> tuple[str, str, str]:
    """Secondary order, always ascending: case-folded name, exact name, id."""
    return (item.name.casefold(), item.name, item.id)


def sort_items(
    items: Iterable[Item],
    key: SortKey | str = SortKey.NAME,
    order: SortOrder | str = SortOrder.ASC,
) -> list[Item]:
    """
    Sort items into a total order.

    Rules:
        - The primary key follows `order`.
        - Ties are broken by tie_break_key ascending, in both directions
          ('A' before 'a' before 'b').
        - KIND ascending puts folders first; descending puts files first.
    """
    sort_key = _coerce_key(key)
    sort_order = _coerce_order(order)

    # Two stable passes: tie-breakers first, then the primary key.
    ordered = sorted(items, key=tie_break_key)
    ordered.sort(key=_PRIMARY_KEYS[sort_key], reverse=sort_order is SortOrder.DESC)
    return ordered


def _coerce_key(key: SortKey | str) -> SortKey:
    try:
        return SortKey(key)
    except ValueError as exc:
        raise ValidationError(f"Unknown sort key: {key!r}", cause=exc) from exc


def _coerce_order(order: SortOrder | str) -> SortOrder:
    try:
        return SortOrder(order)
    except ValueError as exc:
        raise ValidationError(f"Unknown sort order: {order!r}", cause=exc) from exc
