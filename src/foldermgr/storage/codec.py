"""Item <-> plain dict conversion (camelCase keys, RFC3339 timestamps)."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from foldermgr.errors import StorageError
from foldermgr.models import FolderColor, Item, ItemKind, Permission, PrincipalType, Role
from foldermgr.util.time import parse_rfc3339, to_rfc3339


def item_to_dict(item: Item) -> dict[str, Any]:
    return {
        "id": item.id,
        "name": item.name,
        "type": item.kind.value,
        "parentId": item.parent_id,
        "size": item.size,
        "category": item.category,
        "isShared": item.is_shared,
        "color": item.color.value if item.color is not None else None,
        "createdAt": _dt_out(item.created_at),
        "modifiedAt": _dt_out(item.modified_at),
        "modifiedBy": item.modified_by,
        "teamId": item.team_id,
        "dealId": item.deal_id,
        "ownerId": item.owner_id,
        "fileType": item.file_type,
        "url": item.url,
        "permissions": [permission_to_dict(p) for p in item.permissions],
    }


def item_from_dict(data: dict[str, Any]) -> Item:
    """
    Build an Item from a persisted dict.

    Raises:
        StorageError: missing id/name, non-int size, non-bool isShared or
            unknown type, color, role.
    """
    if not isinstance(data, dict):
        raise StorageError("Item entry must be an object")

    item_id = data.get("id")
    name = data.get("name")
    if not isinstance(item_id, str) or not item_id:
        raise StorageError("Item entry has no id", details={"entry": data})
    if not isinstance(name, str):
        raise StorageError("Item entry has no name", details={"item_id": item_id})

    size = data.get("size", 0)
    if isinstance(size, bool) or not isinstance(size, int):
        raise StorageError("size must be an int", details={"item_id": item_id, "size": size})
    is_shared = data.get("isShared", False)
    if not isinstance(is_shared, bool):
        raise StorageError(
            "isShared must be a bool",
            details={"item_id": item_id, "isShared": is_shared},
        )

    color = data.get("color")
    perms = data.get("permissions") or []
    if not isinstance(perms, list):
        raise StorageError("permissions must be a list", details={"item_id": item_id})

    return Item(
        id=item_id,
        name=name,
        kind=_enum(ItemKind, data.get("type"), "type", item_id),
        parent_id=_opt_str(data.get("parentId")),
        size=size,
        category=_opt_str(data.get("category")),
        is_shared=is_shared,
        color=_enum(FolderColor, color, "color", item_id) if color is not None else None,
        created_at=_dt_in(data.get("createdAt"), item_id),
        modified_at=_dt_in(data.get("modifiedAt"), item_id),
        modified_by=_opt_str(data.get("modifiedBy")),
        team_id=_opt_str(data.get("teamId")),
        deal_id=_opt_str(data.get("dealId")),
        owner_id=_opt_str(data.get("ownerId")),
        file_type=_opt_str(data.get("fileType")),
        url=_opt_str(data.get("url")),
        permissions=tuple(permission_from_dict(p, item_id) for p in perms),
    )


def permission_to_dict(permission: Permission) -> dict[str, str]:
    return {
        "principalId": permission.principal_id,
        "principalType": permission.principal_type.value,
        "role": permission.role.value,
    }


def permission_from_dict(data: Any, item_id: str = "") -> Permission:
    if not isinstance(data, dict) or not isinstance(data.get("principalId"), str):
        raise StorageError("Malformed permission entry", details={"item_id": item_id})
    return Permission(
        principal_id=data["principalId"],
        principal_type=_enum(PrincipalType, data.get("principalType"), "principalType", item_id),
        role=_enum(Role, data.get("role"), "role", item_id),
    )


def _enum(enum_cls, value: Any, field_name: str, item_id: str):
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise StorageError(
            f"Unknown {field_name}: {value!r}",
            details={"item_id": item_id, field_name: value},
            cause=exc,
        ) from exc


def _opt_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _dt_out(dt: Optional[datetime]) -> Optional[str]:
    return to_rfc3339(dt) if dt is not None else None


def _dt_in(value: Any, item_id: str) -> Optional[datetime]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise StorageError("Timestamp must be a string", details={"item_id": item_id})
    try:
        return parse_rfc3339(value)
    except ValueError as exc:
        raise StorageError(
            f"Invalid timestamp: {value!r}",
            details={"item_id": item_id},
            cause=exc,
        ) from exc
