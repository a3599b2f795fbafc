"""Strict validation helpers for ItemStore."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from foldermgr.errors import (
    CycleError,
    NotFoundError,
    TypeMismatchError,
    ValidationError,
)
from foldermgr.models import FolderColor, ItemKind, Permission
from foldermgr.util.names import clean_name
from foldermgr.util.time import normalize_dt

from .snapshot import ItemSnapshot


def validate_exists(snapshot: ItemSnapshot, item_id: str, what: str) -> None:
    if not snapshot.has(item_id):
        raise NotFoundError(f"{what} does not exist: {item_id}", details={"item_id": item_id})


def validate_is_folder(snapshot: ItemSnapshot, item_id: str, what: str) -> None:
    if not snapshot.get(item_id).is_folder:
        raise TypeMismatchError(
            f"{what} must be a folder: {item_id}",
            details={"item_id": item_id},
        )


def validate_parent(snapshot: ItemSnapshot, parent_id: Optional[str], what: str) -> None:
    """None means root level and is always valid."""
    if parent_id is None:
        return
    if not snapshot.has(parent_id):
        raise NotFoundError(
            f"{what} does not exist: {parent_id}",
            details={"parent_id": parent_id},
        )
    if not snapshot.get(parent_id).is_folder:
        raise TypeMismatchError(
            f"{what} must be a folder: {parent_id}",
            details={"parent_id": parent_id},
        )


def validate_name(name: Any, what: str = "Name") -> str:
    """Return the trimmed name. Raises ValidationError if blank."""
    cleaned = clean_name(name)
    if cleaned is None:
        raise ValidationError(f"{what} must be a non-empty string", details={"name": name})
    return cleaned


def validate_kind(kind: Any) -> ItemKind:
    try:
        return ItemKind(kind)
    except ValueError as exc:
        raise ValidationError(f"Unknown item kind: {kind!r}", cause=exc) from exc


def validate_size(size: Any, kind: ItemKind) -> int:
    if isinstance(size, bool) or not isinstance(size, int) or size < 0:
        raise ValidationError("size must be a non-negative integer", details={"size": size})
    if kind is ItemKind.FOLDER and size != 0:
        raise ValidationError("Folders always have size 0", details={"size": size})
    return size


def validate_color(color: Any, kind: ItemKind) -> Optional[FolderColor]:
    if color is None:
        return None
    if kind is not ItemKind.FOLDER:
        raise TypeMismatchError("color can only be set on folders")
    try:
        return FolderColor(color)
    except ValueError as exc:
        raise ValidationError(f"Unknown folder color: {color!r}", cause=exc) from exc


def validate_flag(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a bool", details={field_name: value})
    return value


def validate_timestamp(value: Any, field_name: str) -> datetime:
    try:
        return normalize_dt(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            f"{field_name} must be a timezone-aware datetime",
            details={field_name: value},
            cause=e,
        ) from e


def validate_optional_str(value: Any, field_name: str) -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string or None", details={field_name: value})
    return value


def validate_permissions(permissions: Any) -> tuple[Permission, ...]:
    perms = tuple(permissions)
    seen: set[tuple[Any, str]] = set()
    for perm in perms:
        if not isinstance(perm, Permission):
            raise ValidationError("permissions must contain Permission objects")
        if perm.key in seen:
            raise ValidationError(
                "Duplicate grant for principal",
                details={"principal_id": perm.principal_id},
            )
        seen.add(perm.key)
    return perms


def validate_no_cycle(
    snapshot: ItemSnapshot,
    item_id: str,
    new_parent_id: Optional[str],
    action: str,
) -> None:
    """
    Reject placing `item_id` under itself or one of its descendants.

    Walks from new_parent towards root; if item_id is hit, the operation would
    make the item its own ancestor.
    """
    if new_parent_id is None:
        return
    if new_parent_id == item_id:
        raise CycleError(
            f"{action} would create a cycle (target == new parent)",
            details={"item_id": item_id, "parent_id": new_parent_id},
        )
    if item_id in snapshot.iter_ancestor_ids(new_parent_id):
        raise CycleError(
            f"{action} would create a cycle",
            details={"item_id": item_id, "parent_id": new_parent_id},
        )
