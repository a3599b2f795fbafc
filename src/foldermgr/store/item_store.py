"""ItemStore: the authoritative item collection and its mutation surface."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Iterable, Optional

from foldermgr.errors import NotFoundError, ValidationError
from foldermgr.models import Item, ItemKind, Permission, PrincipalType, Role
from foldermgr.util.ids import IdFactory, new_item_id
from foldermgr.util.names import COPY_SUFFIX, copy_name, rename_keeping_extension
from foldermgr.util.time import Clock, normalize_dt, now_utc

from .snapshot import ItemSnapshot
from .validators import (
    validate_color,
    validate_exists,
    validate_flag,
    validate_kind,
    validate_name,
    validate_no_cycle,
    validate_optional_str,
    validate_parent,
    validate_permissions,
    validate_size,
    validate_timestamp,
)

logger = logging.getLogger(__name__)

_CREATE_FIELDS: frozenset[str] = frozenset(
    {
        "size",
        "category",
        "is_shared",
        "color",
        "modified_at",
        "modified_by",
        "team_id",
        "deal_id",
        "owner_id",
        "file_type",
        "url",
        "permissions",
    }
)
_ATTRIBUTE_FIELDS: frozenset[str] = frozenset({"color", "is_shared", "category"})
_REF_FIELDS: tuple[str, ...] = (
    "category",
    "modified_by",
    "team_id",
    "deal_id",
    "owner_id",
    "file_type",
    "url",
)


class ItemStore:
    """
    Flat id -> item collection with parent links.

    Every mutating method validates against the current state first and only
    then applies the change, so a failed call leaves the store untouched.
    The store never derives views; see foldermgr.query for that.
    """

    def __init__(
        self,
        items: Iterable[Item] = (),
        *,
        id_factory: IdFactory = new_item_id,
        clock: Clock = now_utc,
        copy_suffix: str = COPY_SUFFIX,
    ) -> None:
        self._id_factory = id_factory
        self._clock = clock
        self._copy_suffix = copy_suffix
        self._items: dict[str, Item] = {}
        self._issued_ids: set[str] = set()
        self._snapshot: Optional[ItemSnapshot] = None
        self._load(items)

    # ----------------------------
    # Read APIs
    # ----------------------------
    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def has(self, item_id: str) -> bool:
        return item_id in self._items

    def get(self, item_id: str) -> Item:
        validate_exists(self.snapshot(), item_id, "Item")
        return self._items[item_id]

    def items(self) -> list[Item]:
        """All items in insertion order."""
        return list(self._items.values())

    def snapshot(self) -> ItemSnapshot:
        """Return an immutable view of the current state."""
        if self._snapshot is None:
            self._snapshot = ItemSnapshot.from_items(self._items.values())
        return self._snapshot

    # ----------------------------
    # Mutation APIs
    # ----------------------------
    def create(
        self,
        name: str,
        kind: ItemKind | str,
        *,
        parent_id: Optional[str] = None,
        **attrs: Any,
    ) -> Item:
        """
        Create a new item under `parent_id` (None = root level).

        Raises:
            ValidationError: blank name, bad attribute value or unknown attribute.
            NotFoundError: parent does not exist.
            TypeMismatchError: parent is a file, or color given for a file.
        """
        unknown = set(attrs) - _CREATE_FIELDS
        if unknown:
            raise ValidationError(
                "Unknown item attributes",
                details={"attributes": sorted(unknown)},
            )

        snap = self.snapshot()
        item_kind = validate_kind(kind)
        clean = validate_name(name)
        validate_parent(snap, parent_id, "Parent")

        now = self._now()
        modified_at = attrs.pop("modified_at", None)
        if modified_at is not None:
            modified_at = validate_timestamp(modified_at, "modified_at")
        fields: dict[str, Any] = {
            "size": validate_size(attrs.pop("size", 0), item_kind),
            "color": validate_color(attrs.pop("color", None), item_kind),
            "is_shared": validate_flag(attrs.pop("is_shared", False), "is_shared"),
            "permissions": validate_permissions(attrs.pop("permissions", ())),
            "modified_at": modified_at or now,
        }
        for key in _REF_FIELDS:
            fields[key] = validate_optional_str(attrs.pop(key, None), key)

        item = Item(
            id=self._new_id(),
            name=clean,
            kind=item_kind,
            parent_id=parent_id,
            created_at=now,
            **fields,
        )
        self._put(item)
        self._issued_ids.add(item.id)
        logger.debug("Created %s %s under %s", item.kind.value, item.id, parent_id)
        return item

    def rename(self, item_id: str, new_name: str) -> Item:
        """
        Rename an item.

        For files whose current name has an extension ('report.pdf'), the new
        name is treated as a base name and the old extension is re-appended
        ('final' -> 'final.pdf'). Folders take the new name as-is.
        """
        snap = self.snapshot()
        validate_exists(snap, item_id, "Item")
        clean = validate_name(new_name, "New name")

        item = snap.get(item_id)
        if item.is_file:
            clean = rename_keeping_extension(item.name, clean)

        updated = replace(item, name=clean, modified_at=self._now())
        self._put(updated)
        logger.debug("Renamed %s to %r", item_id, clean)
        return updated

    def set_parent(self, item_id: str, new_parent_id: Optional[str]) -> Item:
        """
        Move an item under `new_parent_id` (None = root level).

        Raises:
            NotFoundError / TypeMismatchError: target is not an existing folder.
            CycleError: target is the item itself or one of its descendants.
        """
        snap = self.snapshot()
        validate_exists(snap, item_id, "Item")
        validate_parent(snap, new_parent_id, "New parent")
        validate_no_cycle(snap, item_id, new_parent_id, "MOVE")

        updated = replace(snap.get(item_id), parent_id=new_parent_id, modified_at=self._now())
        self._put(updated)
        logger.debug("Moved %s under %s", item_id, new_parent_id)
        return updated

    def remove(self, item_id: str) -> list[str]:
        """
        Remove an item and, for folders, its whole subtree.

        Returns:
            Removed ids: the item first, then descendants breadth-first.

        Raises:
            NotFoundError: unknown id (stale references are reported, not ignored).
        """
        snap = self.snapshot()
        validate_exists(snap, item_id, "Item")

        removed = list(snap.iter_subtree_ids(item_id))
        for rid in removed:
            del self._items[rid]
        self._snapshot = None
        logger.debug("Removed %s (%d items)", item_id, len(removed))
        return removed

    def copy_subtree(self, item_id: str, target_parent_id: Optional[str]) -> Item:
        """
        Deep-copy an item (and its subtree) under `target_parent_id`.

        Every clone gets a fresh id; the clones keep their relative structure.
        Only the top clone is renamed ('<name> - Copy').

        Returns:
            The top clone.

        Raises:
            CycleError: target lies inside the subtree being copied.
        """
        snap = self.snapshot()
        validate_exists(snap, item_id, "Item")
        validate_parent(snap, target_parent_id, "Target parent")
        validate_no_cycle(snap, item_id, target_parent_id, "COPY")

        source_ids = list(snap.iter_subtree_ids(item_id))
        id_map: dict[str, str] = {}
        for sid in source_ids:
            new_id = self._new_id()
            if new_id in id_map.values():
                raise ValidationError("Id factory returned a duplicate id", details={"item_id": new_id})
            id_map[sid] = new_id

        now = self._now()
        clones: list[Item] = []
        for sid in source_ids:
            src = snap.get(sid)
            if sid == item_id:
                parent_id = target_parent_id
                name = copy_name(src.name, self._copy_suffix)
            else:
                parent_id = id_map[src.parent_id]  # type: ignore[index]
                name = src.name
            clones.append(
                replace(
                    src,
                    id=id_map[sid],
                    name=name,
                    parent_id=parent_id,
                    created_at=now,
                    modified_at=now,
                )
            )

        for clone in clones:
            self._put(clone)
            self._issued_ids.add(clone.id)
        logger.debug(
            "Copied %s to %s under %s (%d items)",
            item_id,
            id_map[item_id],
            target_parent_id,
            len(clones),
        )
        return clones[0]

    def set_attributes(self, item_id: str, **patch: Any) -> Item:
        """
        Shallow-merge `color`, `is_shared` and `category`.

        Raises:
            ValidationError: unknown key or invalid value.
            TypeMismatchError: color set on a file.
        """
        snap = self.snapshot()
        validate_exists(snap, item_id, "Item")

        unknown = set(patch) - _ATTRIBUTE_FIELDS
        if unknown:
            raise ValidationError(
                "Only color, is_shared and category can be set",
                details={"attributes": sorted(unknown)},
            )

        item = snap.get(item_id)
        changes: dict[str, Any] = {}
        if "color" in patch:
            changes["color"] = validate_color(patch["color"], item.kind)
        if "is_shared" in patch:
            changes["is_shared"] = validate_flag(patch["is_shared"], "is_shared")
        if "category" in patch:
            changes["category"] = validate_optional_str(patch["category"], "category")

        updated = replace(item, modified_at=self._now(), **changes)
        self._put(updated)
        logger.debug("Updated %s attributes: %s", item_id, sorted(changes))
        return updated

    def grant_permission(self, item_id: str, permission: Permission) -> Item:
        """
        Add a grant, replacing any existing grant for the same principal.

        Raises:
            ValidationError: the principal holds the owner grant and the new
                role is not owner.
        """
        snap = self.snapshot()
        validate_exists(snap, item_id, "Item")
        validate_permissions([permission])

        item = snap.get(item_id)
        current = next((p for p in item.permissions if p.key == permission.key), None)
        if current is not None and current.role is Role.OWNER and permission.role is not Role.OWNER:
            raise ValidationError(
                "The owner grant cannot be replaced",
                details={"item_id": item_id, "principal_id": permission.principal_id},
            )
        perms = [p for p in item.permissions if p.key != permission.key]
        perms.append(permission)

        updated = replace(item, permissions=tuple(perms), modified_at=self._now())
        self._put(updated)
        logger.debug(
            "Granted %s to %s %s on %s",
            permission.role.value,
            permission.principal_type.value,
            permission.principal_id,
            item_id,
        )
        return updated

    def revoke_permission(
        self,
        item_id: str,
        principal_id: str,
        principal_type: PrincipalType = PrincipalType.USER,
    ) -> Item:
        """
        Remove the grant of one principal.

        Raises:
            NotFoundError: no such grant.
            ValidationError: the grant is the owner grant.
        """
        snap = self.snapshot()
        validate_exists(snap, item_id, "Item")

        item = snap.get(item_id)
        try:
            key = (PrincipalType(principal_type), principal_id)
        except ValueError as exc:
            raise ValidationError(
                f"Unknown principal type: {principal_type!r}", cause=exc
            ) from exc
        existing = [p for p in item.permissions if p.key == key]
        if not existing:
            raise NotFoundError(
                f"No grant for {key[0].value} {principal_id}",
                details={"item_id": item_id, "principal_id": principal_id},
            )
        if existing[0].role is Role.OWNER:
            raise ValidationError(
                "The owner grant cannot be revoked",
                details={"item_id": item_id, "principal_id": principal_id},
            )

        perms = tuple(p for p in item.permissions if p.key != key)
        updated = replace(item, permissions=perms, modified_at=self._now())
        self._put(updated)
        logger.debug("Revoked %s %s on %s", key[0].value, principal_id, item_id)
        return updated

    # ----------------------------
    # Internals
    # ----------------------------
    def _put(self, item: Item) -> None:
        self._items[item.id] = item
        self._snapshot = None

    def _now(self) -> datetime:
        return normalize_dt(self._clock())

    def _new_id(self) -> str:
        new_id = self._id_factory()
        if not isinstance(new_id, str) or not new_id:
            raise ValidationError("Id factory must return a non-empty string")
        if new_id in self._issued_ids:
            raise ValidationError("Id factory returned a reused id", details={"item_id": new_id})
        return new_id

    def _load(self, items: Iterable[Item]) -> None:
        """
        Load pre-existing items and check every invariant.

        Raises on the first violation; the store is not usable afterwards.
        """
        for item in items:
            if item.id in self._items:
                raise ValidationError("Duplicate item id", details={"item_id": item.id})
            validate_name(item.name)
            kind = validate_kind(item.kind)
            validate_size(item.size, kind)
            validate_color(item.color, kind)
            validate_flag(item.is_shared, "is_shared")
            validate_permissions(item.permissions)
            for field_name in ("created_at", "modified_at"):
                value = getattr(item, field_name)
                if value is not None:
                    validate_timestamp(value, field_name)
            self._items[item.id] = item
            self._issued_ids.add(item.id)

        snap = self.snapshot()
        for item in snap.items:
            validate_parent(snap, item.parent_id, "Parent")
            # Drains the walk; raises CycleError on a loop.
            for _ in snap.iter_ancestor_ids(item.id):
                pass
